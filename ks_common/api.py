"""Public API surface for ks_common."""

from ks_common.config import parse_bool_env, parse_file_mode_env, parse_int_env
from ks_common.errors import (
    BootstrapEngineError,
    ClusterValidationError,
    KSError,
    MalformedConfigurationError,
    OperationCancelledError,
    OperationStateError,
    PersistenceError,
    PluginResolutionError,
    TopologyError,
    UnsupportedOperationError,
    ValidationReason,
    error_to_payload,
)
from ks_common.logging import configure_logging
from ks_common.models.hosts import HostSpec
from ks_common.stop_token import StopToken

__all__ = [
    "BootstrapEngineError",
    "ClusterValidationError",
    "HostSpec",
    "KSError",
    "MalformedConfigurationError",
    "OperationCancelledError",
    "OperationStateError",
    "PersistenceError",
    "PluginResolutionError",
    "StopToken",
    "TopologyError",
    "UnsupportedOperationError",
    "ValidationReason",
    "configure_logging",
    "error_to_payload",
    "parse_bool_env",
    "parse_file_mode_env",
    "parse_int_env",
]
