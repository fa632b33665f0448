"""Plugin management services."""

from site_operations_manager.services.plugins.backup import BackupManager
from site_operations_manager.services.plugins.config import PluginManagerConfig
from site_operations_manager.services.plugins.exceptions import (
    PluginConfigError,
    PluginError,
    PluginRequirementsError,
    PluginRestoreError,
)
from site_operations_manager.services.plugins.lifecycle_manager import (
    NOT_INSTALLED_MESSAGE,
    SUCCESS_MESSAGE,
    PluginLifecycleManager,
)
from site_operations_manager.services.plugins.models import (
    PluginInfo,
    UninstallResult,
    UninstallState,
)

__all__ = [
    "NOT_INSTALLED_MESSAGE",
    "SUCCESS_MESSAGE",
    "BackupManager",
    "PluginConfigError",
    "PluginError",
    "PluginInfo",
    "PluginLifecycleManager",
    "PluginManagerConfig",
    "PluginRequirementsError",
    "PluginRestoreError",
    "UninstallResult",
    "UninstallState",
]
