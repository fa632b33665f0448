"""CLI commands for the hosting plugin."""

from site_operations_manager.plugins.hosting.commands.auth import register_auth_commands
from site_operations_manager.plugins.hosting.commands.env import register_env_commands

__all__ = ["register_auth_commands", "register_env_commands"]
