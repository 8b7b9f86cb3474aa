"""Table builders for topology and networking output."""

from __future__ import annotations

from typing import Mapping

from rich.table import Table

from ks_networking.api import NetworkingPlugin
from ks_provisioner.api import ResolvedTopology


def build_topology_table(
    cluster_name: str, topology: ResolvedTopology, plugin: NetworkingPlugin
) -> Table:
    """One row per node, load balancer first, in bootstrap order."""
    table = Table(
        title=f"Cluster {cluster_name} ({plugin.name} networking)",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Node", style="cyan")
    table.add_column("Role")
    table.add_column("Address")
    table.add_column("Machine")

    for node in topology.nodes():
        machine = ""
        if node.machine is not None:
            machine = (
                f"{node.machine.image} {node.machine.cpus}cpu "
                f"{node.machine.memory} {node.machine.disk}"
            )
        table.add_row(node.name, node.role.value, node.address or "(to be launched)", machine)
    return table


def build_networking_table(
    plugins: Mapping[str, NetworkingPlugin], default: NetworkingPlugin
) -> Table:
    table = Table(title="Networking plugins", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Default", justify="center")
    table.add_column("Pod CIDR")
    table.add_column("Manifest", overflow="fold")

    for name in sorted(plugins):
        plugin = plugins[name]
        table.add_row(
            name,
            "✓" if plugin.name == default.name else "",
            plugin.default_pod_cidr or "-",
            plugin.manifest,
        )
    return table
