"""Bootstrap engine that drives kubeadm on cluster hosts over SSH (Fabric)."""

from __future__ import annotations

import logging
import shlex
from typing import Callable, Optional

from fabric import Connection
from invoke.exceptions import UnexpectedExit

from ks_bootstrap.interface import BootstrapPlan
from ks_bootstrap.kubeadm import scripts
from ks_bootstrap.kubeadm.settings import KubeadmSettings
from ks_bootstrap.multipass import MultipassLauncher
from ks_common.api import BootstrapEngineError, HostSpec
from ks_provisioner.api import ClusterNode, ResolvedTopology

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[HostSpec], Connection]


def _fabric_connection(host: HostSpec) -> Connection:
    """Create a Fabric connection to a cluster host."""
    return Connection(
        host=host.address,
        user=host.user,
        port=host.port,
        connect_kwargs=host.connect_kwargs(),
    )


class KubeadmEngine:
    """Create a kubeadm cluster on the nodes of a bootstrap plan.

    Multipass nodes are launched first. The first master initializes the
    control plane, the remaining masters join it in order, then the workers
    join in order.
    """

    def __init__(
        self,
        settings: Optional[KubeadmSettings] = None,
        launcher: Optional[MultipassLauncher] = None,
        connection_factory: Optional[ConnectionFactory] = None,
    ) -> None:
        self._settings = settings or KubeadmSettings.from_env()
        self._launcher = launcher or MultipassLauncher(
            state_dir=self._settings.state_dir,
            ssh_user=self._settings.multipass_user,
        )
        self._connect = connection_factory or _fabric_connection
        self._first_master: Optional[ClusterNode] = None

    def create_cluster(self, plan: BootstrapPlan) -> None:
        hide = not plan.verbose
        topology = self._materialize(plan)
        first = topology.first_master
        endpoint = topology.control_plane_endpoint

        for node in topology.masters + topology.workers:
            self._run(node, "prepare node", scripts.prepare_node(self._settings.kubernetes_version), hide)

        if topology.ha_proxy is not None:
            self._run(
                topology.ha_proxy, "configure haproxy", scripts.configure_haproxy(topology.masters), hide
            )

        logger.info("Initializing control plane on %s (endpoint %s)", first.name, endpoint.address)
        self._run(
            first,
            "kubeadm init",
            scripts.kubeadm_init(endpoint.address, plan.effective_pod_cidr, plan.service_cidr),
            hide,
        )
        logger.info("Installing networking plugin %s", plan.networking.name)
        self._run(first, "install networking", scripts.apply_manifest(plan.networking.manifest), hide)

        join_command = self._run(first, "create join token", scripts.PRINT_JOIN_COMMAND, True).strip()
        if not join_command:
            raise BootstrapEngineError(
                f"kubeadm returned no join command on {first.name}",
                context={"node": first.name},
            )

        if topology.is_highly_available:
            certificate_key = self._certificate_key(first)
            for master in topology.masters[1:]:
                logger.info("Joining control-plane node %s", master.name)
                self._run(
                    master,
                    "join control plane",
                    scripts.control_plane_join(join_command, certificate_key),
                    hide,
                )

        for worker in topology.workers:
            logger.info("Joining worker node %s", worker.name)
            self._run(worker, "join worker", join_command, hide)

        self._first_master = first

    def get_kube_config(self) -> str:
        if self._first_master is None:
            raise BootstrapEngineError("No cluster has been created by this engine")
        return self._run(self._first_master, "read kubeconfig", scripts.READ_ADMIN_CONF, True)

    def _materialize(self, plan: BootstrapPlan) -> ResolvedTopology:
        """Return plan nodes with connection details, launching VMs as needed."""
        ha_proxy = self._ensure_host(plan.ha_proxy_node) if plan.ha_proxy_node else None
        masters = [self._ensure_host(node) for node in plan.master_nodes]
        workers = [self._ensure_host(node) for node in plan.worker_nodes]
        if not masters:
            raise BootstrapEngineError(
                "Bootstrap plan has no master node", context={"cluster": plan.cluster_name}
            )
        return ResolvedTopology(masters=tuple(masters), workers=tuple(workers), ha_proxy=ha_proxy)

    def _ensure_host(self, node: ClusterNode) -> ClusterNode:
        if node.is_materialized:
            return node
        return self._launcher.launch(node)

    def _certificate_key(self, first: ClusterNode) -> str:
        output = self._run(first, "upload certificates", scripts.UPLOAD_CERTS, True)
        lines = [line.strip() for line in output.splitlines() if line.strip()]
        if not lines:
            raise BootstrapEngineError(
                f"kubeadm returned no certificate key on {first.name}",
                context={"node": first.name},
            )
        return lines[-1]

    def _run(self, node: ClusterNode, step: str, command: str, hide: bool) -> str:
        """Run ``command`` as root on ``node`` and return its stdout."""
        if node.host is None:
            raise BootstrapEngineError(
                f"Node {node.name} has no connection details", context={"node": node.name}
            )
        logger.debug("Running %s on %s", step, node.name)
        conn = self._connect(node.host)
        try:
            result = conn.sudo(f"bash -c {shlex.quote(command)}", hide=hide)
        except UnexpectedExit as exc:
            stderr = (exc.result.stderr or "").strip()
            raise BootstrapEngineError(
                f"{step} failed on {node.name}: {stderr or exc.result.exited}",
                context={"node": node.name, "step": step, "exit_code": exc.result.exited},
                cause=exc,
            ) from exc
        finally:
            conn.close()
        return result.stdout
