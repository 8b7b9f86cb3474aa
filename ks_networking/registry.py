"""
Registry of networking plugins available to cluster operations.
"""

from __future__ import annotations

import functools
import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

from ks_common.discovery.entrypoints import load_entrypoints

from .builtin import BUILTIN_PLUGINS, DEFAULT_PLUGIN
from .interface import NetworkingPlugin


logger = logging.getLogger(__name__)
ENTRYPOINT_GROUP = "kubestrike.networking"
DEFAULT_PLUGIN_KEY = "default"


class NetworkingRegistry:
    """Read-only table of networking plugins keyed by name.

    The table is filled once at construction (explicit plugins plus, when
    requested, entry-point plugins) and frozen afterwards. The default plugin
    is stored under the reserved ``"default"`` key.
    """

    def __init__(
        self,
        plugins: Iterable[NetworkingPlugin],
        default: str = DEFAULT_PLUGIN.name,
        discover_entrypoints: bool = False,
    ):
        table: Dict[str, NetworkingPlugin] = {}

        def _register(plugin: Any) -> None:
            self._add(table, plugin)

        for plugin in plugins:
            _register(plugin)
        if discover_entrypoints:
            load_entrypoints([ENTRYPOINT_GROUP], _register, label="networking plugin")

        if default not in table:
            raise ValueError(f"Default networking plugin '{default}' is not registered")
        table[DEFAULT_PLUGIN_KEY] = table[default]
        self._plugins: Mapping[str, NetworkingPlugin] = MappingProxyType(table)

    @staticmethod
    def _add(table: Dict[str, NetworkingPlugin], plugin: Any) -> None:
        if not isinstance(plugin, NetworkingPlugin):
            # Duck typing for plugins built against another copy of the interface.
            if hasattr(plugin, "name") and hasattr(plugin, "manifest"):
                plugin = NetworkingPlugin(
                    name=plugin.name,
                    manifest=plugin.manifest,
                    default_pod_cidr=getattr(plugin, "default_pod_cidr", None),
                    description=getattr(plugin, "description", ""),
                )
            else:
                raise TypeError(f"Unknown networking plugin type: {type(plugin)}")
        if plugin.name == DEFAULT_PLUGIN_KEY:
            raise ValueError(f"'{DEFAULT_PLUGIN_KEY}' is reserved for the default plugin")
        if plugin.name in table:
            logger.warning("Networking plugin %s registered twice; keeping the first", plugin.name)
            return
        table[plugin.name] = plugin

    @property
    def default(self) -> NetworkingPlugin:
        return self._plugins[DEFAULT_PLUGIN_KEY]

    def lookup(self, name: Optional[str]) -> Optional[NetworkingPlugin]:
        """Resolve a plugin by exact name; blank names resolve to the default."""
        if name is None or not name.strip():
            return self.default
        return self._plugins.get(name)

    def available(self) -> Dict[str, NetworkingPlugin]:
        """Return registered plugins by name, without the default alias."""
        return {
            name: plugin
            for name, plugin in self._plugins.items()
            if name != DEFAULT_PLUGIN_KEY
        }


@functools.lru_cache(maxsize=None)
def create_registry() -> NetworkingRegistry:
    """Build the process-wide registry (built-ins plus entry points) once."""
    return NetworkingRegistry(BUILTIN_PLUGINS, discover_entrypoints=True)
