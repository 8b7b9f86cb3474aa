"""
Command-line interface for kubestrike.

Creates Kubernetes clusters on Multipass VMs or baremetal hosts from a
declarative configuration file.
"""

from __future__ import annotations

from typing import Optional

import typer

from ks_common.api import configure_logging
from ks_ui.cli.commands.apply import register_apply_command
from ks_ui.cli.commands.networking import create_networking_app
from ks_ui.cli.commands.validate import register_validate_command
from ks_ui.wiring import UIContext

ctx_store = UIContext()

app = typer.Typer(
    help="Provision Kubernetes clusters on Multipass VMs or baremetal hosts.",
    no_args_is_help=True,
)


@app.callback()
def entry(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING...). Defaults to KS_LOG_LEVEL or INFO.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit logs as JSON lines.",
    ),
) -> None:
    """Global options shared by every command."""
    configure_logging(level=log_level, json=True if json_logs else None, force=True)


register_apply_command(app, ctx_store)
register_validate_command(app, ctx_store)
app.add_typer(create_networking_app(ctx_store), name="networking")


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
