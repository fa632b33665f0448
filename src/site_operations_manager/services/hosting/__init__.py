"""Hosting platform service managers."""

from site_operations_manager.services.hosting.environment_manager import (
    CODE_REBUILD_PARAMS,
    PROTECTED_ENVIRONMENTS,
    EnvironmentManager,
    parse_site_env,
)
from site_operations_manager.services.hosting.workflow_manager import WorkflowManager

__all__ = [
    "CODE_REBUILD_PARAMS",
    "PROTECTED_ENVIRONMENTS",
    "EnvironmentManager",
    "WorkflowManager",
    "parse_site_env",
]
