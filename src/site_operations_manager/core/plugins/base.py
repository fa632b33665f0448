"""Base plugin interface and specifications using pluggy.

These are the CLI's own extension plugins (command groups such as ``env`` or
``self``), not the Composer packages managed by ``siteops self plugin``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    import typer

hookspec = pluggy.HookspecMarker("site_operations_manager")
hookimpl = pluggy.HookimplMarker("site_operations_manager")


class _PluginSpec:
    """Plugin hook specifications."""

    @hookspec
    def initialize(self, config: dict[str, Any]) -> None:
        """Initialize the plugin with its configuration section.

        Args:
            config: Plugin-specific configuration dictionary.
        """

    @hookspec
    def register_commands(self, app: typer.Typer) -> None:
        """Register CLI commands with the main application.

        Args:
            app: The main Typer application to register commands with.
        """

    @hookspec
    def cleanup(self) -> None:
        """Release plugin resources on shutdown."""


class Plugin:
    """Base class for CLI plugins.

    Subclasses set ``name`` and ``version`` and usually override
    ``on_initialize`` and ``register_commands``.
    """

    name: str = "base"
    version: str = "0.0.0"
    description: str = ""

    def __init__(self) -> None:
        """Initialize the plugin instance."""
        if self.name == "base":
            raise ValueError(f"{self.__class__.__name__} must define 'name' class attribute")
        if self.version == "0.0.0":
            raise ValueError(f"{self.__class__.__name__} must define 'version' class attribute")
        self._config: dict[str, Any] = {}
        self._initialized: bool = False

    @hookimpl
    def initialize(self, config: dict[str, Any]) -> None:
        """Store the configuration section and run ``on_initialize``."""
        self._config = config
        self.on_initialize()
        self._initialized = True

    def on_initialize(self) -> None:
        """Hook for subclasses to parse configuration."""

    @hookimpl
    def register_commands(self, app: typer.Typer) -> None:
        """Register CLI commands. Override in subclasses."""

    @hookimpl
    def cleanup(self) -> None:
        """Release resources. Override in subclasses."""
        self._initialized = False

    def get_config(self, key: str, default: Any = None) -> Any:
        """Get a value from the plugin's configuration section."""
        return self._config.get(key, default)

    @property
    def is_initialized(self) -> bool:
        """Whether ``initialize`` has completed."""
        return self._initialized
