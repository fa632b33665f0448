"""Hosting platform plugin: environment and authentication commands."""

from site_operations_manager.plugins.hosting.plugin import HostingPlugin

__all__ = ["HostingPlugin"]
