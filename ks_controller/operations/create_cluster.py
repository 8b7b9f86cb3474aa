"""Create a cluster from a ``CreateCluster`` document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar, Union

from ks_bootstrap.interface import BootstrapEngine, BootstrapPlan
from ks_common.api import (
    BootstrapEngineError,
    KSError,
    OperationCancelledError,
    PluginResolutionError,
    StopToken,
)
from ks_networking.api import NetworkingPlugin, NetworkingRegistry, create_registry
from ks_provisioner.api import ResolvedTopology, TopologyResolver

from ks_controller.credentials import kubeconfig_path, write_kubeconfig
from ks_controller.models.cluster import (
    CREATE_CLUSTER_KIND,
    ClusterRequest,
    parse_cluster_request,
)
from ks_controller.operations.base import ClusterOperation, OperationState
from ks_controller.settings import ControllerSettings

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], BootstrapEngine]
T = TypeVar("T")


def _default_engine_factory() -> BootstrapEngine:
    from ks_bootstrap.api import KubeadmEngine

    return KubeadmEngine()


@dataclass(frozen=True)
class CreateClusterResult:
    """Outcome of a successful cluster creation."""

    cluster_name: str
    kubeconfig_path: Path
    topology: ResolvedTopology
    networking: NetworkingPlugin


class CreateClusterOperation(ClusterOperation):
    """Resolve hosts and CNI, drive the bootstrap engine, store the kubeconfig."""

    kind = CREATE_CLUSTER_KIND

    def __init__(
        self,
        request: ClusterRequest,
        *,
        resolver: Optional[TopologyResolver] = None,
        registry: Optional[NetworkingRegistry] = None,
        engine_factory: Optional[EngineFactory] = None,
        settings: Optional[ControllerSettings] = None,
    ) -> None:
        super().__init__()
        self.request = request
        self._resolver = resolver or TopologyResolver()
        self._registry = registry or create_registry()
        self._engine_factory = engine_factory or _default_engine_factory
        self._settings = settings or ControllerSettings.from_env()
        self.state = OperationState.PARSED

    @classmethod
    def parse(cls, raw: Union[bytes, str], **options: Any) -> "CreateClusterOperation":
        return cls(parse_cluster_request(raw), **options)

    def _validate(self) -> None:
        self.request.check(self.kind)

    def resolve_topology(self) -> ResolvedTopology:
        return self._resolver.resolve(self.request)

    def resolve_networking(self) -> NetworkingPlugin:
        """Map the requested plugin name to a registered plugin."""
        networking = self.request.networking
        requested = networking.plugin.strip() if networking else ""
        plugin = self._registry.lookup(requested)
        if plugin is None:
            raise PluginResolutionError(
                f"network plugin not found: {requested}",
                context={"plugin": requested, "available": sorted(self._registry.available())},
            )
        return plugin

    def _run(self, verbose: bool, stop_token: Optional[StopToken]) -> CreateClusterResult:
        request = self.request
        logger.info("Provider found: %s", request.provider.value)

        topology = self.resolve_topology()
        plugin = self.resolve_networking()
        logger.info("Networking plugin: %s", plugin.name)
        # Reject an unusable cluster name before any host is touched.
        target = kubeconfig_path(request.cluster_name, self._settings)

        if stop_token is not None:
            if stop_token.should_stop():
                raise OperationCancelledError(
                    "Cluster creation cancelled before provisioning started",
                    context={"cluster": request.cluster_name},
                )
            # Past this point provisioning is not interruptible by the token.
            stop_token.restore()

        networking = request.networking
        plan = BootstrapPlan(
            cluster_name=request.cluster_name,
            ha_proxy_node=topology.ha_proxy,
            master_nodes=topology.masters,
            worker_nodes=topology.workers,
            networking=plugin,
            verbose=verbose,
            pod_cidr=networking.pod_cidr if networking else "",
            service_cidr=networking.service_cidr if networking else "",
        )

        logger.info("Creating cluster %s...", request.cluster_name)
        engine = self._engine_factory()
        self._call_engine(lambda: engine.create_cluster(plan))
        kube_config = self._call_engine(engine.get_kube_config)

        path = write_kubeconfig(request.cluster_name, kube_config, self._settings, target)
        logger.info("You can access the cluster now; kubeconfig written to %s", path)
        return CreateClusterResult(
            cluster_name=request.cluster_name,
            kubeconfig_path=path,
            topology=topology,
            networking=plugin,
        )

    def _call_engine(self, call: Callable[[], T]) -> T:
        """Invoke the engine once, surfacing its failure message unchanged."""
        try:
            return call()
        except KSError:
            raise
        except Exception as exc:
            raise BootstrapEngineError(
                str(exc),
                context={"cluster": self.request.cluster_name},
                cause=exc,
            ) from exc
