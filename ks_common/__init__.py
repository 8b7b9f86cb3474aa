"""Shared utilities for kubestrike components."""

from ks_common.api import HostSpec, KSError, StopToken, configure_logging

__all__ = ["configure_logging", "HostSpec", "KSError", "StopToken"]
