"""Data models for installed plugins and uninstall outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

PLUGIN_PACKAGE_TYPE = "siteops-plugin"


@dataclass
class PluginInfo:
    """An installed plugin package."""

    name: str
    path: Path
    version: str = ""
    description: str = ""

    @property
    def project(self) -> str:
        """Short project name (the part after ``vendor/``)."""
        return self.name.rpartition("/")[2]

    def matches(self, identifier: str) -> bool:
        """Whether ``identifier`` names this plugin by package or project name."""
        wanted = identifier.strip().lower()
        return wanted in (self.name.lower(), self.project.lower())

    @classmethod
    def from_manifest(cls, path: Path, data: dict[str, Any]) -> PluginInfo:
        """Create from a package's ``composer.json`` contents."""
        return cls(
            name=str(data.get("name") or f"{path.parent.name}/{path.name}"),
            path=path,
            version=str(data.get("version", "")),
            description=str(data.get("description", "")),
        )


class UninstallState(str, Enum):
    """Progress of a single plugin removal."""

    PENDING = "pending"
    BACKED_UP = "backed_up"
    DEPENDENCIES_UPDATED = "dependencies_updated"
    REMOVED_FROM_DEPS = "removed_from_dependencies"
    REPO_DEREGISTERED = "repository_deregistered"
    REMOVED_FROM_PLUGIN_DIR = "removed_from_plugins"
    DONE = "done"
    ROLLED_BACK = "rolled_back"
    NOT_INSTALLED = "not_installed"
    BACKUP_FAILED = "backup_failed"


@dataclass
class UninstallResult:
    """Terminal outcome of removing one plugin.

    ``failed_at`` is the last state reached before a failure, and
    ``exit_code`` the composer status that caused it, when there was one.
    """

    project: str
    state: UninstallState
    message: str
    plugin: PluginInfo | None = None
    exit_code: int | None = None
    failed_at: UninstallState | None = None
    backups: list[Path] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Whether the plugin was removed."""
        return self.state is UninstallState.DONE
