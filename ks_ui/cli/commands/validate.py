from __future__ import annotations

import logging
from pathlib import Path

import typer

from ks_common.api import KSError, error_to_payload
from ks_controller.api import CreateClusterOperation
from ks_ui.presenters.tables import build_topology_table
from ks_ui.wiring import UIContext

logger = logging.getLogger(__name__)


def register_validate_command(app: typer.Typer, ctx: UIContext) -> None:
    """Attach the `validate` command to the root app."""

    @app.command("validate")
    def validate(
        file: Path = typer.Option(
            ...,
            "--file",
            "-f",
            exists=True,
            dir_okay=False,
            readable=True,
            help="Cluster configuration (YAML or JSON).",
        ),
    ) -> None:
        """Check a configuration and show the resolved nodes without provisioning."""
        raw = file.read_bytes()
        try:
            operation = ctx.dispatcher().parse(raw, **ctx.operation_options)
            operation.validate()
            if isinstance(operation, CreateClusterOperation):
                topology = operation.resolve_topology()
                plugin = operation.resolve_networking()
                ctx.presenter.table(
                    build_topology_table(operation.request.cluster_name, topology, plugin)
                )
        except KSError as exc:
            logger.error("Validation failed", extra=error_to_payload(exc))
            ctx.presenter.error(str(exc))
            raise typer.Exit(1)

        ctx.presenter.success(f"{file} is a valid {operation.kind} configuration")
