from collections import defaultdict
from pathlib import Path

import pytest
from rich.console import Console
from rich.table import Table

from ks_bootstrap.interface import BootstrapPlan
from ks_controller.settings import ControllerSettings

KNOWN_MARKERS = {
    "unit_common",
    "unit_networking",
    "unit_provisioner",
    "unit_controller",
    "unit_bootstrap",
    "unit_ui",
}

FAKE_KUBECONFIG = "apiVersion: v1\nkind: Config\nclusters: []\n"


class FakeEngine:
    """Bootstrap engine that records plans instead of touching hosts."""

    def __init__(self, kube_config: str = FAKE_KUBECONFIG, error: Exception | None = None):
        self.kube_config = kube_config
        self.error = error
        self.plans: list[BootstrapPlan] = []
        self.kubeconfig_reads = 0

    def create_cluster(self, plan: BootstrapPlan) -> None:
        self.plans.append(plan)
        if self.error is not None:
            raise self.error

    def get_kube_config(self) -> str:
        self.kubeconfig_reads += 1
        return self.kube_config


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_engine():
    """Build FakeEngine instances with custom behaviour."""
    return FakeEngine


@pytest.fixture
def controller_settings(tmp_path: Path) -> ControllerSettings:
    return ControllerSettings(kubeconfig_dir=tmp_path, kubeconfig_mode=0o600)


@pytest.fixture
def multipass_document() -> str:
    return (
        "kind: CreateCluster\n"
        "provider: multipass\n"
        "clusterName: dev\n"
        "multipass:\n"
        "  masters: 1\n"
        "  workers: 2\n"
        "networking:\n"
        "  plugin: flannel\n"
    )


@pytest.fixture
def baremetal_document() -> str:
    return (
        "kind: CreateCluster\n"
        "provider: baremetal\n"
        "clusterName: prod\n"
        "baremetal:\n"
        "  hosts:\n"
        "    - {name: lb, address: 10.0.0.10, role: loadbalancer}\n"
        "    - {name: m1, address: 10.0.0.11, role: master}\n"
        "    - {name: m2, address: 10.0.0.12, role: master}\n"
        "    - {name: m3, address: 10.0.0.13, role: master}\n"
        "    - {name: w1, address: 10.0.0.21, role: worker}\n"
        "networking:\n"
        "  plugin: calico\n"
        "  podCidr: 10.10.0.0/16\n"
        "  serviceCidr: 10.20.0.0/16\n"
    )


def pytest_terminal_summary(terminalreporter, exitstatus, config):
    """Print pass/fail counts per test marker at the end of the session."""
    _ = (exitstatus, config)
    marker_stats = defaultdict(
        lambda: {"passed": 0, "failed": 0, "skipped": 0, "total": 0, "duration": 0.0}
    )

    for outcome in ["passed", "failed", "skipped"]:
        for report in terminalreporter.stats.get(outcome, []):
            # Count the test call, or a skip raised during setup
            if report.when == "call" or (report.when == "setup" and report.outcome == "skipped"):
                duration = getattr(report, "duration", 0.0)
                for marker in KNOWN_MARKERS:
                    if marker in report.keywords:
                        stats = marker_stats[marker]
                        stats[outcome] += 1
                        stats["total"] += 1
                        stats["duration"] += duration

    if not marker_stats:
        return

    table = Table(title="Test Statistics by Marker", show_header=True, header_style="bold magenta")
    table.add_column("Marker", style="cyan")
    table.add_column("Total", justify="right")
    table.add_column("Passed", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Duration (s)", justify="right", style="blue")

    for marker in sorted(marker_stats):
        stats = marker_stats[marker]
        table.add_row(
            marker,
            str(stats["total"]),
            str(stats["passed"]),
            str(stats["failed"]),
            str(stats["skipped"]),
            f"{stats['duration']:.2f}",
        )

    console = Console()
    console.print("\n")
    console.print(table)
