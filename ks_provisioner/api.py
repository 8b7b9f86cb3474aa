"""Public topology API surface."""

from ks_provisioner.engine.service import TopologyResolver
from ks_provisioner.models.types import (
    ClusterNode,
    MachineSpec,
    NodeRole,
    ProviderName,
    ResolvedTopology,
)
from ks_provisioner.providers.baremetal import BaremetalTopology
from ks_provisioner.providers.multipass import MultipassTopology

__all__ = [
    "BaremetalTopology",
    "ClusterNode",
    "MachineSpec",
    "MultipassTopology",
    "NodeRole",
    "ProviderName",
    "ResolvedTopology",
    "TopologyResolver",
]
