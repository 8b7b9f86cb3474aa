"""Public networking API surface."""

from ks_networking.builtin import BUILTIN_PLUGINS, DEFAULT_PLUGIN
from ks_networking.interface import NetworkingPlugin
from ks_networking.registry import (
    DEFAULT_PLUGIN_KEY,
    ENTRYPOINT_GROUP,
    NetworkingRegistry,
    create_registry,
)

__all__ = [
    "BUILTIN_PLUGINS",
    "DEFAULT_PLUGIN",
    "DEFAULT_PLUGIN_KEY",
    "ENTRYPOINT_GROUP",
    "NetworkingPlugin",
    "NetworkingRegistry",
    "create_registry",
]
