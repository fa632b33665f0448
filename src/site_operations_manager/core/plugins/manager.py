"""Plugin manager for loading and managing CLI plugins."""

from __future__ import annotations

import importlib.metadata
from typing import TYPE_CHECKING, Any

import pluggy
import structlog

from site_operations_manager.core.plugins.base import Plugin, _PluginSpec

if TYPE_CHECKING:
    from collections.abc import Iterable

    import typer

logger = structlog.get_logger()


class PluginManager:
    """Discovers plugins from entry points and drives their lifecycle."""

    NAMESPACE = "site_operations_manager.plugins"

    def __init__(self) -> None:
        """Initialize the plugin manager."""
        self._pm = pluggy.PluginManager("site_operations_manager")
        self._pm.add_hookspecs(_PluginSpec)
        self._plugins: dict[str, Plugin] = {}
        self._initialized = False

    def discover_plugins(self) -> list[str]:
        """Return the names of all plugins advertised through entry points."""
        discovered = []
        try:
            for ep in importlib.metadata.entry_points(group=self.NAMESPACE):
                discovered.append(ep.name)
                logger.debug("Discovered plugin", name=ep.name, value=ep.value)
        except Exception as e:
            logger.warning("Error discovering plugins", error=str(e))
        return discovered

    def register(self, plugin: Plugin) -> None:
        """Register an already constructed plugin instance."""
        if plugin.name in self._plugins:
            logger.debug("Plugin already registered", name=plugin.name)
            return
        self._pm.register(plugin, name=plugin.name)
        self._plugins[plugin.name] = plugin
        logger.debug("Registered plugin", name=plugin.name, version=plugin.version)

    def load_plugin(self, name: str) -> bool:
        """Load a plugin by entry point name.

        Returns:
            True if the plugin is loaded, False otherwise.
        """
        if name in self._plugins:
            logger.debug("Plugin already loaded", name=name)
            return True

        try:
            for ep in importlib.metadata.entry_points(group=self.NAMESPACE):
                if ep.name != name:
                    continue
                plugin_class = ep.load()
                plugin = plugin_class() if callable(plugin_class) else plugin_class
                self._pm.register(plugin, name=name)
                self._plugins[name] = plugin
                logger.debug("Loaded plugin", name=name, version=plugin.version)
                return True

            logger.warning("Plugin not found", name=name)
            return False
        except Exception as e:
            logger.error("Failed to load plugin", name=name, error=str(e))
            return False

    def load_enabled(self, names: Iterable[str]) -> list[str]:
        """Load every named plugin and return the ones that loaded."""
        return [name for name in names if self.load_plugin(name)]

    def initialize_all(self, config: dict[str, Any]) -> None:
        """Initialize loaded plugins with their ``plugins.<name>`` sections.

        Args:
            config: Raw configuration dictionary.
        """
        sections = config.get("plugins") or {}
        for name, plugin in self._plugins.items():
            plugin_config = sections.get(name) or {}
            try:
                plugin.initialize(plugin_config)
                logger.debug("Initialized plugin", name=name)
            except Exception as e:
                logger.error("Failed to initialize plugin", name=name, error=str(e))

        self._initialized = True

    def register_commands(self, app: typer.Typer) -> None:
        """Let every loaded plugin add its commands to ``app``."""
        try:
            self._pm.hook.register_commands(app=app)
        except Exception as e:
            logger.error("Error registering plugin commands", error=str(e))

    def cleanup_all(self) -> None:
        """Run the cleanup hook on all loaded plugins."""
        try:
            self._pm.hook.cleanup()
        except Exception as e:
            logger.error("Error during plugin cleanup", error=str(e))
        self._initialized = False

    def get_plugin(self, name: str) -> Plugin | None:
        """Get a loaded plugin by name."""
        return self._plugins.get(name)

    def list_plugins(self) -> list[dict[str, Any]]:
        """Describe all loaded plugins."""
        return [
            {
                "name": p.name,
                "version": p.version,
                "description": p.description,
                "initialized": p.is_initialized,
            }
            for p in self._plugins.values()
        ]
