from __future__ import annotations

import typer

from ks_ui.presenters.tables import build_networking_table
from ks_ui.wiring import UIContext


def create_networking_app(ctx: UIContext) -> typer.Typer:
    """Build the networking Typer app, wired to the given context."""
    app = typer.Typer(help="Inspect available networking (CNI) plugins.", no_args_is_help=True)

    @app.command("list")
    def networking_list() -> None:
        """List registered networking plugins."""
        registry = ctx.registry()
        ctx.presenter.table(build_networking_table(registry.available(), registry.default))

    return app
