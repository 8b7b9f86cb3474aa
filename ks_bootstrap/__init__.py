"""Cluster bootstrap engines for kubestrike."""

from ks_bootstrap.interface import BootstrapEngine, BootstrapPlan

__all__ = ["BootstrapEngine", "BootstrapPlan"]
