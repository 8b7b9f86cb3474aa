"""Topology resolution for kubestrike clusters."""

from ks_provisioner.api import (  # noqa: F401
    ClusterNode,
    MachineSpec,
    NodeRole,
    ProviderName,
    ResolvedTopology,
    TopologyResolver,
)

__all__ = [
    "ClusterNode",
    "MachineSpec",
    "NodeRole",
    "ProviderName",
    "ResolvedTopology",
    "TopologyResolver",
]
