"""Plugin management exceptions."""

from __future__ import annotations

from pathlib import Path


class PluginError(Exception):
    """Base exception for plugin management errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class PluginConfigError(PluginError):
    """Raised when plugin directory settings are invalid."""


class PluginRequirementsError(PluginError):
    """Raised when plugin commands cannot run on this system."""


class PluginRestoreError(PluginError):
    """Raised when a rollback could not restore a directory.

    The backups are left in place so they can be restored by hand.
    """

    def __init__(self, message: str, backups: list[Path], details: str | None = None) -> None:
        super().__init__(message, details)
        self.backups = backups
