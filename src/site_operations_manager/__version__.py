"""Version information for site_operations_manager."""

__version__ = "0.1.0"
