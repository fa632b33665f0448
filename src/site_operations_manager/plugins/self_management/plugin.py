"""Self-management plugin implementation.

Provides ``siteops self plugin`` commands for listing and removing
Composer-managed plugins.
"""

from __future__ import annotations

import structlog
import typer

from site_operations_manager.core.plugins.base import Plugin, hookimpl
from site_operations_manager.plugins.self_management.commands import register_plugin_commands
from site_operations_manager.services.plugins.config import PluginManagerConfig
from site_operations_manager.services.plugins.lifecycle_manager import PluginLifecycleManager

logger = structlog.get_logger()


class SelfPlugin(Plugin):
    """Plugin management for siteops itself."""

    name = "self"
    version = "0.1.0"
    description = "Manage siteops plugins"

    def __init__(self) -> None:
        """Initialize self-management plugin."""
        super().__init__()
        self._plugin_config: PluginManagerConfig | None = None
        self._manager: PluginLifecycleManager | None = None

    def on_initialize(self) -> None:
        """Parse plugin directory settings from config and environment."""
        try:
            self._plugin_config = PluginManagerConfig.from_env(self._config or {})
            logger.debug(
                "Self plugin initialized",
                plugins_dir=str(self._plugin_config.plugins_dir),
                dependencies_dir=str(self._plugin_config.dependencies_dir),
            )
        except Exception as e:
            logger.error("Failed to initialize self plugin", error=str(e))
            raise

    @property
    def plugin_config(self) -> PluginManagerConfig:
        """Parsed plugin directory settings, falling back to the environment."""
        if self._plugin_config is None:
            self._plugin_config = PluginManagerConfig.from_env(self._config or {})
        return self._plugin_config

    def _get_lifecycle_manager(self) -> PluginLifecycleManager:
        if self._manager is None:
            self._manager = PluginLifecycleManager(self.plugin_config)
        return self._manager

    @hookimpl
    def register_commands(self, app: typer.Typer) -> None:
        """Register self-management commands with the CLI."""
        register_plugin_commands(app, self._get_lifecycle_manager)
        logger.debug("Self-management commands registered")
