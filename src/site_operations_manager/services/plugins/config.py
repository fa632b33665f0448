"""Configuration for siteops plugin management."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from site_operations_manager.services.plugins.exceptions import PluginConfigError

SITEOPS_HOME = Path.home() / ".siteops"
DEFAULT_PLUGINS_DIR = SITEOPS_HOME / "plugins"
DEFAULT_DEPENDENCIES_DIR = SITEOPS_HOME / "dependencies"
DEFAULT_BACKUPS_DIR = Path.home() / ".cache" / "siteops" / "backups"


class PluginManagerConfig(BaseModel):
    """Directories and Composer settings used by ``siteops self plugin``."""

    model_config = ConfigDict(extra="forbid")

    plugins_dir: Path = DEFAULT_PLUGINS_DIR
    dependencies_dir: Path = DEFAULT_DEPENDENCIES_DIR
    backups_dir: Path = DEFAULT_BACKUPS_DIR
    composer_binary: str | None = None
    command_timeout: int = 600
    keep_backups: bool = False

    @field_validator("plugins_dir", "dependencies_dir", "backups_dir", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Any:
        """Expand ``~`` in configured directories."""
        if isinstance(v, str | Path):
            return Path(v).expanduser()
        return v

    @field_validator("command_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("command_timeout must be positive")
        return v

    @model_validator(mode="after")
    def validate_backups_outside_sources(self) -> PluginManagerConfig:
        """Backups may not live inside a directory that gets backed up."""
        backups = self.backups_dir.resolve()
        for source in (self.plugins_dir, self.dependencies_dir):
            if backups.is_relative_to(source.resolve()):
                raise ValueError(f"backups_dir must not be inside {source}")
        return self

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> PluginManagerConfig:
        """Create configuration with environment variable overrides.

        Supported environment variables:
            SITEOPS_PLUGINS_DIR: Plugin installation directory
            SITEOPS_DEPENDENCIES_DIR: Shared dependency directory
            SITEOPS_BACKUPS_DIR: Where backups are written
            SITEOPS_COMPOSER: Path to the composer binary

        Raises:
            PluginConfigError: If the merged configuration is invalid.
        """
        config_dict = dict(base_config or {})

        if plugins_dir := os.environ.get("SITEOPS_PLUGINS_DIR"):
            config_dict["plugins_dir"] = plugins_dir
        if dependencies_dir := os.environ.get("SITEOPS_DEPENDENCIES_DIR"):
            config_dict["dependencies_dir"] = dependencies_dir
        if backups_dir := os.environ.get("SITEOPS_BACKUPS_DIR"):
            config_dict["backups_dir"] = backups_dir
        if composer := os.environ.get("SITEOPS_COMPOSER"):
            config_dict["composer_binary"] = composer

        try:
            return cls.model_validate(config_dict)
        except ValidationError as e:
            raise PluginConfigError("Invalid plugin configuration", details=str(e)) from e
