"""Topology for clusters built from Multipass VMs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from ks_provisioner.models.types import (
    ClusterNode,
    MachineSpec,
    NodeRole,
    ResolvedTopology,
)

if TYPE_CHECKING:
    from ks_controller.models.cluster import MultipassSpec

logger = logging.getLogger(__name__)


class MultipassTopology:
    """Describe the VMs to launch for a Multipass cluster.

    Nothing is created here: the nodes carry sizing only and get connection
    details once the bootstrap engine has launched them.
    """

    def resolve(self, cluster_name: str, spec: "MultipassSpec") -> ResolvedTopology:
        machine = MachineSpec(
            image=spec.image,
            cpus=spec.cpus,
            memory=spec.memory,
            disk=spec.disk,
        )
        masters = self._synthesize(cluster_name, NodeRole.MASTER, spec.masters, machine)
        workers = self._synthesize(cluster_name, NodeRole.WORKER, spec.workers, machine)

        ha_proxy = None
        if len(masters) > 1:
            ha_proxy = ClusterNode(
                name=f"{cluster_name}-haproxy",
                role=NodeRole.LOADBALANCER,
                machine=machine,
            )

        logger.debug(
            "Multipass topology for %s: %d masters, %d workers, ha=%s",
            cluster_name,
            len(masters),
            len(workers),
            ha_proxy is not None,
        )
        return ResolvedTopology(masters=tuple(masters), workers=tuple(workers), ha_proxy=ha_proxy)

    @staticmethod
    def _synthesize(
        cluster_name: str, role: NodeRole, count: int, machine: MachineSpec
    ) -> List[ClusterNode]:
        return [
            ClusterNode(name=f"{cluster_name}-{role.value}-{idx}", role=role, machine=machine)
            for idx in range(1, count + 1)
        ]
