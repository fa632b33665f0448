"""Hosting platform API exceptions."""

from __future__ import annotations


class HostingError(Exception):
    """Base exception for hosting platform errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            details: Additional details.
        """
        super().__init__(message)
        self.message = message
        self.details = details


class HostingConnectionError(HostingError):
    """Raised when the hosting API cannot be reached."""


class HostingAuthError(HostingError):
    """Raised when there is no valid session or the API rejects it."""


class HostingConfigError(HostingError):
    """Raised when configuration or the stored session is invalid."""


class HostingAPIError(HostingError):
    """Raised when the hosting API returns an error response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message.
            status_code: HTTP status code.
            details: Additional details.
        """
        super().__init__(message, details)
        self.status_code = status_code


class HostingNotFoundError(HostingAPIError):
    """Raised when a site, environment or workflow does not exist."""


class HostingValidationError(HostingError):
    """Raised when a request is refused before reaching the API."""


class HostingFrozenSiteError(HostingValidationError):
    """Raised when a command needs a site that is frozen."""


class WorkflowError(HostingError):
    """Base exception for workflow processing errors."""

    def __init__(
        self,
        message: str,
        workflow_id: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.workflow_id = workflow_id


class WorkflowFailedError(WorkflowError):
    """Raised when a workflow finishes with a failed result."""


class WorkflowTimeoutError(WorkflowError):
    """Raised when a workflow does not finish within the configured timeout."""
