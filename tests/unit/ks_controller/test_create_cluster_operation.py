"""End-to-end tests for the CreateCluster operation with a fake engine."""

from __future__ import annotations

import json
import signal
import stat
from pathlib import Path

import pytest

from ks_common.api import (
    BootstrapEngineError,
    ClusterValidationError,
    OperationCancelledError,
    OperationStateError,
    PersistenceError,
    PluginResolutionError,
    StopToken,
    ValidationReason,
)
from ks_controller.api import (
    ControllerSettings,
    CreateClusterOperation,
    CreateClusterResult,
    OperationState,
)
from ks_networking.api import NetworkingRegistry
from ks_networking.builtin import BUILTIN_PLUGINS, CALICO, FLANNEL


pytestmark = pytest.mark.unit_controller


@pytest.fixture
def registry() -> NetworkingRegistry:
    return NetworkingRegistry(BUILTIN_PLUGINS)


@pytest.fixture
def build(registry, fake_engine, controller_settings):
    def _build(document, **overrides) -> CreateClusterOperation:
        raw = json.dumps(document) if isinstance(document, dict) else document
        options = {
            "registry": registry,
            "engine_factory": lambda: fake_engine,
            "settings": controller_settings,
        }
        options.update(overrides)
        return CreateClusterOperation.parse(raw, **options)

    return _build


def test_multipass_cluster_with_default_networking(build, fake_engine, tmp_path: Path) -> None:
    operation = build(
        {
            "kind": "CreateCluster",
            "provider": "multipass",
            "clusterName": "dev",
            "multipass": {"masters": 1, "workers": 2},
            "networking": {},
        }
    )
    assert operation.state is OperationState.PARSED

    operation.validate()
    assert operation.state is OperationState.VALIDATED

    result = operation.run()
    assert operation.state is OperationState.SUCCEEDED
    assert isinstance(result, CreateClusterResult)
    assert result.networking == FLANNEL
    assert result.topology.ha_proxy is None

    (plan,) = fake_engine.plans
    assert plan.cluster_name == "dev"
    assert plan.networking == FLANNEL
    assert [n.name for n in plan.master_nodes] == ["dev-master-1"]
    assert [n.name for n in plan.worker_nodes] == ["dev-worker-1", "dev-worker-2"]
    assert plan.ha_proxy_node is None
    assert plan.verbose is False

    kubeconfig = tmp_path / ".kubeconfig_dev"
    assert result.kubeconfig_path == kubeconfig
    assert kubeconfig.read_text(encoding="utf-8") == fake_engine.kube_config
    assert stat.S_IMODE(kubeconfig.stat().st_mode) == 0o600


def test_unknown_plugin_fails_before_engine(build, fake_engine, tmp_path: Path) -> None:
    operation = build(
        {
            "kind": "CreateCluster",
            "provider": "multipass",
            "clusterName": "dev",
            "multipass": {"masters": 1},
            "networking": {"plugin": "nonexistent-cni"},
        }
    )
    operation.validate()

    with pytest.raises(PluginResolutionError) as excinfo:
        operation.run()

    assert str(excinfo.value) == "network plugin not found: nonexistent-cni"
    assert operation.state is OperationState.FAILED
    assert fake_engine.plans == []
    assert not (tmp_path / ".kubeconfig_dev").exists()


def test_cidr_mismatch_is_rejected(build, fake_engine) -> None:
    operation = build(
        {
            "kind": "CreateCluster",
            "provider": "multipass",
            "clusterName": "dev",
            "multipass": {"masters": 1},
            "networking": {"podCidr": "10.0.0.0/16"},
        }
    )
    with pytest.raises(ClusterValidationError) as excinfo:
        operation.validate()

    assert excinfo.value.reason is ValidationReason.CIDR_PAIRING
    assert operation.state is OperationState.PARSED
    assert fake_engine.plans == []


def test_wrong_kind_is_rejected(build) -> None:
    operation = build(
        {
            "kind": "AddNode",
            "provider": "multipass",
            "clusterName": "dev",
            "multipass": {"masters": 1},
            "networking": {},
        }
    )
    with pytest.raises(ClusterValidationError) as excinfo:
        operation.validate()
    assert excinfo.value.reason is ValidationReason.KIND_MISMATCH


def test_baremetal_ha_cluster(build, fake_engine, baremetal_document: str) -> None:
    operation = build(baremetal_document)
    operation.validate()
    result = operation.run(verbose=True)

    (plan,) = fake_engine.plans
    assert plan.ha_proxy_node is not None
    assert plan.ha_proxy_node.name == "lb"
    assert [n.name for n in plan.master_nodes] == ["m1", "m2", "m3"]
    assert [n.name for n in plan.worker_nodes] == ["w1"]
    assert plan.networking == CALICO
    assert plan.pod_cidr == "10.10.0.0/16"
    assert plan.service_cidr == "10.20.0.0/16"
    assert plan.verbose is True
    assert result.kubeconfig_path.name == ".kubeconfig_prod"


def test_plugin_name_is_trimmed(build, fake_engine) -> None:
    operation = build(
        {
            "kind": "CreateCluster",
            "provider": "multipass",
            "clusterName": "dev",
            "multipass": {"masters": 1},
            "networking": {"plugin": "  calico  "},
        }
    )
    operation.validate()
    assert operation.run().networking == CALICO


def test_run_requires_validation(build, multipass_document: str, fake_engine) -> None:
    operation = build(multipass_document)
    with pytest.raises(OperationStateError):
        operation.run()
    assert operation.state is OperationState.PARSED
    assert fake_engine.plans == []


def test_operation_cannot_run_twice(build, multipass_document: str) -> None:
    operation = build(multipass_document)
    operation.validate()
    operation.run()
    with pytest.raises(OperationStateError):
        operation.run()
    with pytest.raises(OperationStateError):
        operation.validate()


def test_validate_can_be_repeated(build, multipass_document: str) -> None:
    operation = build(multipass_document)
    operation.validate()
    operation.validate()
    assert operation.state is OperationState.VALIDATED


def test_engine_error_message_is_propagated(
    build, make_engine, multipass_document: str, tmp_path: Path
) -> None:
    engine = make_engine(error=RuntimeError("kubeadm init failed on dev-master-1"))
    operation = build(multipass_document, engine_factory=lambda: engine)
    operation.validate()

    with pytest.raises(BootstrapEngineError) as excinfo:
        operation.run()

    assert str(excinfo.value) == "kubeadm init failed on dev-master-1"
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert operation.state is OperationState.FAILED
    assert engine.kubeconfig_reads == 0
    assert not (tmp_path / ".kubeconfig_dev").exists()


def test_typed_engine_error_passes_through(build, make_engine, multipass_document: str) -> None:
    original = BootstrapEngineError("join failed", context={"node": "dev-worker-1"})
    engine = make_engine(error=original)
    operation = build(multipass_document, engine_factory=lambda: engine)
    operation.validate()

    with pytest.raises(BootstrapEngineError) as excinfo:
        operation.run()
    assert excinfo.value is original


def test_persistence_failure_after_cluster_creation(
    build, fake_engine, multipass_document: str, tmp_path: Path
) -> None:
    settings = ControllerSettings(kubeconfig_dir=tmp_path / "missing", kubeconfig_mode=0o600)
    operation = build(multipass_document, settings=settings)
    operation.validate()

    with pytest.raises(PersistenceError):
        operation.run()

    assert len(fake_engine.plans) == 1
    assert operation.state is OperationState.FAILED


def test_stop_token_cancels_before_engine(
    build, fake_engine, multipass_document: str, tmp_path: Path
) -> None:
    stop_file = tmp_path / "STOP"
    stop_file.touch()
    operation = build(multipass_document)
    operation.validate()

    with pytest.raises(OperationCancelledError):
        operation.run(stop_token=StopToken(stop_file=stop_file, enable_signals=False))

    assert fake_engine.plans == []
    assert operation.state is OperationState.FAILED


def test_interrupt_before_engine_cancels(build, fake_engine, multipass_document: str) -> None:
    operation = build(multipass_document)
    operation.validate()
    stopped: list[int] = []

    with StopToken(on_stop=lambda: stopped.append(1)) as stop_token:
        signal.raise_signal(signal.SIGINT)
        with pytest.raises(OperationCancelledError):
            operation.run(stop_token=stop_token)

    assert stopped == [1]
    assert fake_engine.plans == []
    assert operation.state is OperationState.FAILED


def test_signal_handlers_are_restored_before_provisioning(
    build, make_engine, multipass_document: str
) -> None:
    class RecordingEngine(make_engine):
        def create_cluster(self, plan):
            self.sigint_handler = signal.getsignal(signal.SIGINT)
            super().create_cluster(plan)

    engine = RecordingEngine()
    original = signal.getsignal(signal.SIGINT)
    operation = build(multipass_document, engine_factory=lambda: engine)
    operation.validate()

    with StopToken() as stop_token:
        assert signal.getsignal(signal.SIGINT) != original
        operation.run(stop_token=stop_token)

    assert engine.sigint_handler == original
    assert operation.state is OperationState.SUCCEEDED


def test_cluster_name_with_separator_fails_before_engine(build, fake_engine) -> None:
    operation = build(
        {
            "kind": "CreateCluster",
            "provider": "multipass",
            "clusterName": "team/dev",
            "multipass": {"masters": 1},
            "networking": {},
        }
    )
    operation.validate()

    with pytest.raises(PersistenceError):
        operation.run()

    assert fake_engine.plans == []
    assert operation.state is OperationState.FAILED


def test_engine_factory_is_called_lazily(build, multipass_document: str, fake_engine) -> None:
    calls: list[int] = []

    def factory():
        calls.append(1)
        return fake_engine

    operation = build(multipass_document, engine_factory=factory)
    operation.validate()
    assert calls == []
    operation.run()
    assert calls == [1]


def test_resolution_helpers(build, baremetal_document: str) -> None:
    operation = build(baremetal_document)
    operation.validate()
    assert operation.resolve_networking() == CALICO
    assert operation.resolve_topology().control_plane_endpoint.address == "10.0.0.10"


def test_default_engine_is_kubeadm() -> None:
    from ks_bootstrap.api import KubeadmEngine
    from ks_controller.operations.create_cluster import _default_engine_factory

    assert isinstance(_default_engine_factory(), KubeadmEngine)
