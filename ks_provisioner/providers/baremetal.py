"""Topology for clusters built on already reachable hosts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from ks_common.api import HostSpec, TopologyError
from ks_provisioner.models.types import ClusterNode, NodeRole, ResolvedTopology

if TYPE_CHECKING:
    from ks_controller.models.cluster import BaremetalSpec


class BaremetalTopology:
    """Partition an explicit host inventory by declared role."""

    def resolve(self, cluster_name: str, spec: "BaremetalSpec") -> ResolvedTopology:
        by_role: Dict[NodeRole, List[ClusterNode]] = {role: [] for role in NodeRole}
        seen: set[str] = set()

        for host in spec.hosts:
            if host.name in seen:
                raise TopologyError(
                    f"Duplicate host name '{host.name}' in baremetal inventory",
                    context={"cluster": cluster_name, "host": host.name},
                )
            seen.add(host.name)
            node = ClusterNode(
                name=host.name,
                role=host.role,
                host=HostSpec(
                    name=host.name,
                    address=host.address,
                    port=host.port,
                    user=host.user,
                    private_key=host.private_key,
                ),
            )
            by_role[host.role].append(node)

        masters = by_role[NodeRole.MASTER]
        balancers = by_role[NodeRole.LOADBALANCER]
        if not masters:
            raise TopologyError(
                "Baremetal inventory declares no master host",
                context={"cluster": cluster_name},
            )
        if len(balancers) > 1:
            raise TopologyError(
                "Baremetal inventory declares more than one load balancer",
                context={"cluster": cluster_name, "hosts": [n.name for n in balancers]},
            )
        if len(masters) > 1 and not balancers:
            raise TopologyError(
                "A load balancer host is required when more than one master is declared",
                context={"cluster": cluster_name, "masters": len(masters)},
            )

        return ResolvedTopology(
            masters=tuple(masters),
            workers=tuple(by_role[NodeRole.WORKER]),
            ha_proxy=balancers[0] if balancers else None,
        )
