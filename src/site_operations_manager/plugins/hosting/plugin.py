"""Hosting platform plugin implementation.

This plugin provides the commands that talk to the hosting API:
- Environments: code rebuilds for dev and multidev environments
- Authentication: machine token login, logout and whoami
"""

from __future__ import annotations

import structlog
import typer

from site_operations_manager.core.plugins.base import Plugin, hookimpl
from site_operations_manager.integrations.hosting.client import HostingClient
from site_operations_manager.integrations.hosting.config import HostingConfig, HostingSession
from site_operations_manager.integrations.hosting.exceptions import HostingAuthError
from site_operations_manager.plugins.hosting.commands import (
    register_auth_commands,
    register_env_commands,
)
from site_operations_manager.services.hosting.environment_manager import EnvironmentManager
from site_operations_manager.services.hosting.workflow_manager import WorkflowManager

logger = structlog.get_logger()


class HostingPlugin(Plugin):
    """Hosting platform plugin."""

    name = "hosting"
    version = "0.1.0"
    description = "Hosting platform environments and authentication"

    def __init__(self) -> None:
        """Initialize hosting plugin."""
        super().__init__()
        self._plugin_config: HostingConfig | None = None
        self._client: HostingClient | None = None

    def on_initialize(self) -> None:
        """Parse the plugin configuration.

        Environment variables can override configuration file values.
        """
        try:
            self._plugin_config = HostingConfig.from_env(self._config or {})
            logger.debug("Hosting plugin initialized", base_url=self._plugin_config.base_url)
        except Exception as e:
            logger.error("Failed to initialize hosting plugin", error=str(e))
            raise

    @property
    def hosting_config(self) -> HostingConfig:
        """Parsed plugin configuration, falling back to the environment."""
        if self._plugin_config is None:
            self._plugin_config = HostingConfig.from_env(self._config or {})
        return self._plugin_config

    def _get_client(self) -> HostingClient:
        """Create an authenticated API client from the saved session."""
        if self._client is None:
            session = HostingSession.load()
            if session.is_expired:
                raise HostingAuthError("Your session has expired.")
            self._client = HostingClient(self.hosting_config, session)
        return self._client

    def _get_environment_manager(self) -> EnvironmentManager:
        config = self.hosting_config
        client = self._get_client()
        workflows = WorkflowManager(
            client,
            poll_interval=config.poll_interval,
            max_poll_interval=config.max_poll_interval,
            timeout=config.workflow_timeout,
        )
        return EnvironmentManager(client, workflows)

    @hookimpl
    def register_commands(self, app: typer.Typer) -> None:
        """Register hosting commands with the CLI."""
        register_env_commands(app, self._get_environment_manager)
        register_auth_commands(app, lambda: self.hosting_config)
        logger.debug("Hosting commands registered")

    @hookimpl
    def cleanup(self) -> None:
        """Close the API client."""
        if self._client is not None:
            self._client.close()
            self._client = None
        self._initialized = False
