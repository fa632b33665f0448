"""Top-level configuration models for the siteops CLI.

The configuration file is YAML at ``~/.config/siteops/config.yaml``. Each
enabled plugin may own a section under ``plugins`` which is handed to that
plugin verbatim on initialization::

    version: "1.0"
    environment: development
    profiles:
      default:
        debug: false
        log_level: WARNING
    plugins:
      enabled: [hosting, self]
      hosting:
        poll_interval: 3
      self:
        plugins_dir: ~/.siteops/plugins
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

# XDG-compliant config location
CONFIG_DIR = Path.home() / ".config" / "siteops"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_ENVIRONMENTS = ("development", "staging", "production")

_YAML_HEADER = (
    "# Site Operations CLI Configuration\n"
    "# Generated by 'siteops init'. Plugin sections under 'plugins' are passed\n"
    "# to the matching plugin when it is loaded.\n\n"
)


class ProfileConfig(BaseModel):
    """Settings for a named CLI profile."""

    debug: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and validate the log level name."""
        level = v.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log_level '{v}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        return level


class PluginsConfig(BaseModel):
    """Enabled plugins plus one free-form section per plugin."""

    model_config = ConfigDict(extra="allow")

    enabled: list[str] = Field(default_factory=lambda: ["hosting", "self"])

    def section(self, name: str) -> dict[str, Any]:
        """Return the configuration section for a plugin, or an empty dict."""
        extra = self.model_extra or {}
        value = extra.get(name)
        return dict(value) if isinstance(value, dict) else {}


class SystemConfig(BaseModel):
    """Root configuration document."""

    version: str = "1.0"
    environment: str = "development"
    profiles: dict[str, ProfileConfig] = Field(
        default_factory=lambda: {"default": ProfileConfig()}
    )
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate the deployment environment name."""
        if v not in VALID_ENVIRONMENTS:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {', '.join(VALID_ENVIRONMENTS)}"
            )
        return v

    @property
    def default_profile(self) -> ProfileConfig:
        """The ``default`` profile, falling back to defaults if missing."""
        return self.profiles.get("default", ProfileConfig())

    def plugin_config(self, name: str) -> dict[str, Any]:
        """Return the configuration section for a plugin."""
        return self.plugins.section(name)

    def to_yaml(self) -> str:
        """Serialise the configuration to YAML with a comment header."""
        body = yaml.safe_dump(self.model_dump(mode="json"), default_flow_style=False, sort_keys=False)
        return _YAML_HEADER + body


def load_config(path: Path | None = None) -> SystemConfig | None:
    """Load and validate the configuration file.

    Args:
        path: Config file path. Defaults to CONFIG_FILE.

    Returns:
        The parsed configuration, or None if the file does not exist.

    Raises:
        ValueError: If the file is not valid YAML or fails validation.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return None

    try:
        data = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    return SystemConfig.model_validate(data)


def load_raw_config(path: Path | None = None) -> dict[str, Any]:
    """Load the configuration file as a plain dict without validation.

    Returns an empty dict if the file is missing or cannot be parsed.
    """
    config_path = path or CONFIG_FILE
    if not config_path.exists():
        return {}

    try:
        data = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError:
        return {}
    return data if isinstance(data, dict) else {}
