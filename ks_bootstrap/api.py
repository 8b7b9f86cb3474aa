"""Public bootstrap API surface."""

from ks_bootstrap.interface import BootstrapEngine, BootstrapPlan
from ks_bootstrap.kubeadm.engine import KubeadmEngine
from ks_bootstrap.kubeadm.settings import KubeadmSettings
from ks_bootstrap.multipass import MultipassLauncher

__all__ = [
    "BootstrapEngine",
    "BootstrapPlan",
    "KubeadmEngine",
    "KubeadmSettings",
    "MultipassLauncher",
]
