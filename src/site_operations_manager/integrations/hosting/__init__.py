"""Hosting platform API integration."""

from site_operations_manager.integrations.hosting.client import HostingClient
from site_operations_manager.integrations.hosting.config import (
    HostingConfig,
    HostingSession,
)
from site_operations_manager.integrations.hosting.exceptions import (
    HostingAPIError,
    HostingAuthError,
    HostingConfigError,
    HostingConnectionError,
    HostingError,
    HostingFrozenSiteError,
    HostingNotFoundError,
    HostingValidationError,
    WorkflowError,
    WorkflowFailedError,
    WorkflowTimeoutError,
)

__all__ = [
    "HostingAPIError",
    "HostingAuthError",
    "HostingClient",
    "HostingConfig",
    "HostingConfigError",
    "HostingConnectionError",
    "HostingError",
    "HostingFrozenSiteError",
    "HostingNotFoundError",
    "HostingSession",
    "HostingValidationError",
    "WorkflowError",
    "WorkflowFailedError",
    "WorkflowTimeoutError",
]
