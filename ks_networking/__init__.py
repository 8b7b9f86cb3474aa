"""Networking (CNI) plugin catalog for kubestrike."""

from ks_networking.api import (  # noqa: F401
    DEFAULT_PLUGIN,
    NetworkingPlugin,
    NetworkingRegistry,
    create_registry,
)

__all__ = [
    "DEFAULT_PLUGIN",
    "NetworkingPlugin",
    "NetworkingRegistry",
    "create_registry",
]
