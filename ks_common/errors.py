"""Shared error taxonomy for kubestrike."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class KSError(Exception):
    """Base error type for typed failure handling."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__


class MalformedConfigurationError(KSError):
    """The cluster document cannot be deserialized into the expected shape."""


class ValidationReason(str, Enum):
    """Named conditions rejected by cluster request validation."""

    CLUSTER_NAME_EMPTY = "cluster_name_empty"
    KIND_MISMATCH = "kind_mismatch"
    MULTIPASS_SPEC_MISSING = "multipass_spec_missing"
    BAREMETAL_SPEC_MISSING = "baremetal_spec_missing"
    NETWORKING_MISSING = "networking_missing"
    CIDR_PAIRING = "cidr_pairing"


class ClusterValidationError(KSError):
    """A parsed cluster request failed one validation rule."""

    def __init__(
        self,
        reason: ValidationReason,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        merged = {"reason": reason, **(context or {})}
        super().__init__(message, context=merged)
        self.reason = reason


class PluginResolutionError(KSError):
    """Requested networking plugin is not registered."""


class TopologyError(KSError):
    """Provider-specific host/role resolution failed."""


class BootstrapEngineError(KSError):
    """Failure reported by the cluster bootstrap engine."""


class PersistenceError(KSError):
    """Cluster credentials could not be written to disk."""


class UnsupportedOperationError(KSError):
    """No operation is registered for the document kind."""


class OperationStateError(KSError):
    """An operation step was invoked out of lifecycle order."""


class OperationCancelledError(KSError):
    """The operation was stopped before the bootstrap engine was invoked."""


def error_to_payload(error: KSError) -> dict[str, Any]:
    """Convert a KSError to a structured log/report payload."""
    return {
        "error_type": error.error_type,
        "error": str(error),
        "error_context": error.context,
    }
