"""Public controller API surface."""

from ks_controller.credentials import kubeconfig_path, write_kubeconfig
from ks_controller.models.cluster import (
    CREATE_CLUSTER_KIND,
    BaremetalHost,
    BaremetalSpec,
    ClusterRequest,
    MultipassSpec,
    NetworkingSpec,
    load_document,
    parse_cluster_request,
)
from ks_controller.operations.base import ClusterOperation, OperationState
from ks_controller.operations.create_cluster import (
    CreateClusterOperation,
    CreateClusterResult,
)
from ks_controller.operations.dispatch import OperationDispatcher, create_dispatcher
from ks_controller.settings import ControllerSettings

__all__ = [
    "CREATE_CLUSTER_KIND",
    "BaremetalHost",
    "BaremetalSpec",
    "ClusterOperation",
    "ClusterRequest",
    "ControllerSettings",
    "CreateClusterOperation",
    "CreateClusterResult",
    "MultipassSpec",
    "NetworkingSpec",
    "OperationDispatcher",
    "OperationState",
    "create_dispatcher",
    "kubeconfig_path",
    "load_document",
    "parse_cluster_request",
    "write_kubeconfig",
]
