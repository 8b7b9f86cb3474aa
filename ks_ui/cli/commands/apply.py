from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from ks_common.api import KSError, PersistenceError, StopToken, error_to_payload
from ks_controller.api import CreateClusterResult
from ks_ui.wiring import UIContext

logger = logging.getLogger(__name__)


def register_apply_command(app: typer.Typer, ctx: UIContext) -> None:
    """Attach the `apply` command to the root app."""

    @app.command("apply")
    def apply(
        file: Path = typer.Option(
            ...,
            "--file",
            "-f",
            exists=True,
            dir_okay=False,
            readable=True,
            help="Cluster configuration (YAML or JSON).",
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Stream remote command output while bootstrapping.",
        ),
        stop_file: Optional[Path] = typer.Option(
            None,
            "--stop-file",
            help="Abort before provisioning starts if this file exists.",
        ),
    ) -> None:
        """Run the operation described by a configuration file."""
        raw = file.read_bytes()

        def _on_stop() -> None:
            ctx.presenter.warning("Stop requested; aborting before provisioning starts")

        try:
            operation = ctx.dispatcher().parse(raw, **ctx.operation_options)
            operation.validate()
            ctx.presenter.info(f"Running {operation.kind} from {file.name}")
            # Ctrl-C trips the token until the operation restores the handlers.
            with StopToken(stop_file=stop_file, on_stop=_on_stop) as stop_token:
                result = operation.run(verbose=verbose, stop_token=stop_token)
        except PersistenceError as exc:
            logger.error("Cluster credentials not persisted", extra=error_to_payload(exc))
            ctx.presenter.error(str(exc))
            ctx.presenter.warning(
                "The cluster was created but its credentials were not saved; "
                "copy /etc/kubernetes/admin.conf from the first master manually."
            )
            raise typer.Exit(1)
        except KSError as exc:
            logger.error("Operation failed", extra=error_to_payload(exc))
            ctx.presenter.error(str(exc))
            raise typer.Exit(1)

        if isinstance(result, CreateClusterResult):
            ctx.presenter.success(f"Cluster {result.cluster_name} is ready")
            ctx.presenter.hint(f"KUBECONFIG={result.kubeconfig_path} kubectl get nodes")
        else:
            ctx.presenter.success(f"{operation.kind} completed")
