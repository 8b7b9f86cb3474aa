"""Shared topology types and value objects."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from ks_common.api import HostSpec


class ProviderName(str, Enum):
    """Supported host providers."""

    MULTIPASS = "multipass"
    BAREMETAL = "baremetal"


class NodeRole(str, Enum):
    """Role a host plays in the cluster."""

    MASTER = "master"
    WORKER = "worker"
    LOADBALANCER = "loadbalancer"


@dataclass(frozen=True)
class MachineSpec:
    """Sizing for a virtual machine that still has to be launched."""

    image: str = "22.04"
    cpus: int = 2
    memory: str = "2G"
    disk: str = "10G"


@dataclass(frozen=True)
class ClusterNode:
    """One host of the cluster and the role it plays."""

    name: str
    role: NodeRole
    host: Optional[HostSpec] = None
    machine: Optional[MachineSpec] = None

    @property
    def address(self) -> Optional[str]:
        return self.host.address if self.host else None

    @property
    def is_materialized(self) -> bool:
        """True once connection details are known."""
        return self.host is not None

    def with_host(self, host: HostSpec) -> "ClusterNode":
        return replace(self, host=host)


@dataclass(frozen=True)
class ResolvedTopology:
    """Concrete assignment of hosts to master, worker and HA roles."""

    masters: Tuple[ClusterNode, ...]
    workers: Tuple[ClusterNode, ...] = ()
    ha_proxy: Optional[ClusterNode] = None

    @property
    def first_master(self) -> ClusterNode:
        return self.masters[0]

    @property
    def control_plane_endpoint(self) -> ClusterNode:
        """Node that fronts the API server for clients and joining nodes."""
        return self.ha_proxy if self.ha_proxy is not None else self.first_master

    @property
    def is_highly_available(self) -> bool:
        return len(self.masters) > 1

    def nodes(self) -> Tuple[ClusterNode, ...]:
        """All nodes: load balancer first, then masters, then workers."""
        lead = (self.ha_proxy,) if self.ha_proxy is not None else ()
        return lead + self.masters + self.workers
