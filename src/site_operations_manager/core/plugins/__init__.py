"""Plugin host for site_operations_manager."""

from site_operations_manager.core.plugins.base import Plugin, hookimpl, hookspec
from site_operations_manager.core.plugins.manager import PluginManager

__all__ = ["Plugin", "PluginManager", "hookimpl", "hookspec"]
