"""Contract between cluster operations and the bootstrap engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Tuple, runtime_checkable

from ks_networking.api import NetworkingPlugin
from ks_provisioner.api import ClusterNode


@dataclass(frozen=True)
class BootstrapPlan:
    """Everything the engine needs to stand up one cluster."""

    cluster_name: str
    ha_proxy_node: Optional[ClusterNode]
    master_nodes: Tuple[ClusterNode, ...]
    worker_nodes: Tuple[ClusterNode, ...]
    networking: NetworkingPlugin
    verbose: bool = False
    pod_cidr: str = ""
    service_cidr: str = ""

    @property
    def effective_pod_cidr(self) -> str:
        """Requested pod CIDR, or the one the CNI plugin expects."""
        return self.pod_cidr or self.networking.default_pod_cidr or ""


@runtime_checkable
class BootstrapEngine(Protocol):
    """Provisions control-plane and worker components on resolved hosts."""

    def create_cluster(self, plan: BootstrapPlan) -> None:
        """Create the cluster. Blocks until done; raises on failure."""
        ...

    def get_kube_config(self) -> str:
        """Return the admin kubeconfig of the cluster just created."""
        ...
