"""Hosting API configuration and session storage."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from site_operations_manager.integrations.hosting.exceptions import HostingConfigError

DEFAULT_API_URL = "https://terminus.pantheon.io/api"


class HostingConfig(BaseModel):
    """Connection and workflow polling settings for the hosting API."""

    model_config = ConfigDict(extra="forbid")

    base_url: str = DEFAULT_API_URL
    timeout: float = 30.0
    retries: int = 3
    poll_interval: float = 3.0
    max_poll_interval: float = 15.0
    workflow_timeout: float = 600.0
    verify_ssl: bool = True

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("timeout", "poll_interval", "max_poll_interval", "workflow_timeout")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Durations must be positive."""
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("retries")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        """Validate retries is at least one attempt."""
        if v < 1:
            raise ValueError("retries must be at least 1")
        return v

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> HostingConfig:
        """Create configuration with environment variable overrides.

        Supported environment variables:
            SITEOPS_API_URL: API base URL
            SITEOPS_TIMEOUT: HTTP timeout in seconds
            SITEOPS_POLL_INTERVAL: Initial workflow poll interval in seconds
            SITEOPS_WORKFLOW_TIMEOUT: Maximum time to wait for a workflow

        Raises:
            HostingConfigError: If the merged configuration is invalid.
        """
        config_dict = dict(base_config or {})

        if url := os.environ.get("SITEOPS_API_URL"):
            config_dict["base_url"] = url
        if timeout := os.environ.get("SITEOPS_TIMEOUT"):
            config_dict["timeout"] = timeout
        if interval := os.environ.get("SITEOPS_POLL_INTERVAL"):
            config_dict["poll_interval"] = interval
        if workflow_timeout := os.environ.get("SITEOPS_WORKFLOW_TIMEOUT"):
            config_dict["workflow_timeout"] = workflow_timeout

        try:
            return cls.model_validate(config_dict)
        except ValidationError as e:
            raise HostingConfigError("Invalid hosting configuration", details=str(e)) from e


class HostingSession(BaseModel):
    """An authenticated API session obtained from a machine token."""

    session: SecretStr = Field(..., description="Session token sent as a bearer token")
    user_id: str | None = Field(default=None, description="Authenticated user ID")
    expires_at: datetime | None = Field(default=None, description="Session expiry")

    @property
    def is_expired(self) -> bool:
        """Whether the session has passed its expiry time."""
        if self.expires_at is None:
            return False
        now = datetime.now(self.expires_at.tzinfo)
        return self.expires_at <= now

    @classmethod
    def get_session_path(cls) -> Path:
        """Path of the stored session (~/.config/siteops/session.yaml)."""
        return Path.home() / ".config" / "siteops" / "session.yaml"

    @classmethod
    def load(cls) -> HostingSession:
        """Load the session from the environment or the session file.

        Priority:
        1. SITEOPS_SESSION environment variable
        2. ~/.config/siteops/session.yaml

        Raises:
            HostingConfigError: If the session file is unreadable or invalid.
        """
        if env_session := os.environ.get("SITEOPS_SESSION"):
            return cls(session=SecretStr(env_session))

        session_path = cls.get_session_path()
        if not session_path.exists():
            raise HostingConfigError(
                "You are not logged in. Run 'siteops auth login' first.",
                details=f"Session file not found: {session_path}",
            )

        try:
            data = yaml.safe_load(session_path.read_text())
        except yaml.YAMLError as e:
            raise HostingConfigError("Invalid session file format", details=str(e)) from e

        if not data or "session" not in data:
            raise HostingConfigError(
                "Invalid session file. Run 'siteops auth login' again.",
                details="Missing 'session' in session file",
            )

        return cls(
            session=SecretStr(data["session"]),
            user_id=data.get("user_id"),
            expires_at=data.get("expires_at"),
        )

    def save(self) -> Path:
        """Write the session file with owner-only permissions."""
        session_path = self.get_session_path()
        session_path.parent.mkdir(parents=True, exist_ok=True)

        data: dict[str, Any] = {"session": self.session.get_secret_value()}
        if self.user_id:
            data["user_id"] = self.user_id
        if self.expires_at:
            data["expires_at"] = self.expires_at.isoformat()

        with session_path.open("w") as f:
            yaml.safe_dump(data, f, default_flow_style=False)
        session_path.chmod(0o600)
        return session_path

    @classmethod
    def delete(cls) -> bool:
        """Remove the session file. Returns True if one was removed."""
        session_path = cls.get_session_path()
        if not session_path.exists():
            return False
        session_path.unlink()
        return True

    @classmethod
    def exists(cls) -> bool:
        """Whether a session is available from the environment or disk."""
        if os.environ.get("SITEOPS_SESSION"):
            return True
        return cls.get_session_path().exists()
