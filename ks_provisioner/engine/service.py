"""Facade that routes topology resolution to the provider strategy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ks_common.api import TopologyError
from ks_provisioner.models.types import ProviderName, ResolvedTopology
from ks_provisioner.providers.baremetal import BaremetalTopology
from ks_provisioner.providers.multipass import MultipassTopology

if TYPE_CHECKING:
    from ks_controller.models.cluster import ClusterRequest

logger = logging.getLogger(__name__)


class TopologyResolver:
    """Compute masters, workers and the HA node for a cluster request."""

    def __init__(self) -> None:
        self._multipass = MultipassTopology()
        self._baremetal = BaremetalTopology()

    def resolve(self, request: "ClusterRequest") -> ResolvedTopology:
        """Resolve the topology described by a validated request."""
        spec = request.provider_spec
        if spec is None:
            raise TopologyError(
                f"No {request.provider.value} spec to resolve hosts from",
                context={"cluster": request.cluster_name, "provider": request.provider},
            )

        if request.provider is ProviderName.MULTIPASS:
            topology = self._multipass.resolve(request.cluster_name, spec)
        elif request.provider is ProviderName.BAREMETAL:
            topology = self._baremetal.resolve(request.cluster_name, spec)
        else:  # pragma: no cover - guarded by the ProviderName enum
            raise TopologyError(f"Unsupported provider: {request.provider}")

        logger.info(
            "Resolved %s topology: %d masters, %d workers, ha node %s",
            request.provider.value,
            len(topology.masters),
            len(topology.workers),
            topology.ha_proxy.name if topology.ha_proxy else "none",
        )
        return topology
