"""Self-management plugin: commands that manage siteops itself."""

from site_operations_manager.plugins.self_management.plugin import SelfPlugin

__all__ = ["SelfPlugin"]
