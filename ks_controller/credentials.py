"""Persistence of cluster access credentials."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from ks_common.api import PersistenceError

from ks_controller.settings import KUBECONFIG_PREFIX, ControllerSettings

logger = logging.getLogger(__name__)


def kubeconfig_path(cluster_name: str, settings: ControllerSettings) -> Path:
    """Return the per-cluster kubeconfig location."""
    if os.sep in cluster_name or (os.altsep and os.altsep in cluster_name):
        raise PersistenceError(
            "Cluster name cannot be used as a file name",
            context={"cluster": cluster_name},
        )
    return settings.kubeconfig_dir / f"{KUBECONFIG_PREFIX}{cluster_name}"


def write_kubeconfig(
    cluster_name: str,
    content: str,
    settings: ControllerSettings,
    target: Optional[Path] = None,
) -> Path:
    """Write ``content`` to the cluster kubeconfig file, replacing any previous one.

    ``target`` is the location already returned by ``kubeconfig_path``.

    The cluster already exists when this runs, so a failure leaves live
    infrastructure without local credentials. Nothing is rolled back.
    """
    if target is None:
        target = kubeconfig_path(cluster_name, settings)
    try:
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, settings.kubeconfig_mode)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
    except OSError as exc:
        logger.error(
            "Cluster %s was created but its kubeconfig could not be written to %s; "
            "retrieve /etc/kubernetes/admin.conf from the first master manually",
            cluster_name,
            target,
        )
        raise PersistenceError(
            f"Failed to write kubeconfig to {target}: {exc}",
            context={"cluster": cluster_name, "path": target},
            cause=exc,
        ) from exc
    return target
