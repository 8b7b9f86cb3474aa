"""Cluster operations for kubestrike."""

from ks_controller.api import (  # noqa: F401
    ClusterOperation,
    ClusterRequest,
    CreateClusterOperation,
    CreateClusterResult,
    OperationDispatcher,
    create_dispatcher,
    parse_cluster_request,
)

__all__ = [
    "ClusterOperation",
    "ClusterRequest",
    "CreateClusterOperation",
    "CreateClusterResult",
    "OperationDispatcher",
    "create_dispatcher",
    "parse_cluster_request",
]
