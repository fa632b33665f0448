"""Site Operations CLI - manage hosted sites, environments and plugins."""

from site_operations_manager.__version__ import __version__

__all__ = ["__version__"]
