"""Hosting API data models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

WORKFLOW_SUCCEEDED = "succeeded"
WORKFLOW_FAILED = "failed"


class Site(BaseModel):
    """A hosted site."""

    id: str = Field(..., description="Site UUID")
    name: str = Field(..., description="Machine name of the site")
    label: str | None = Field(default=None, description="Human readable label")
    framework: str | None = Field(default=None, description="CMS framework")
    frozen: bool = Field(default=False, description="Whether the site is frozen")

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Site:
        """Create from a ``sites/{id}`` response."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            label=data.get("label"),
            framework=data.get("framework"),
            frozen=bool(data.get("frozen", False)),
        )


class Environment(BaseModel):
    """A deployment environment belonging to a site."""

    id: str = Field(..., description="Environment name, e.g. dev or a multidev name")
    site_id: str = Field(..., description="Owning site UUID")

    @property
    def name(self) -> str:
        """Environment name (same as its ID)."""
        return self.id

    @classmethod
    def from_api_response(cls, env_id: str, site_id: str, data: dict[str, Any]) -> Environment:
        """Create from one entry of the ``sites/{id}/environments`` mapping."""
        return cls(
            id=data.get("id", env_id),
            site_id=site_id,
        )


class Workflow(BaseModel):
    """A remote, asynchronously processed unit of work."""

    id: str = Field(..., description="Workflow UUID")
    site_id: str = Field(..., description="Owning site UUID")
    type: str | None = Field(default=None, description="Workflow type")
    description: str | None = Field(default=None, description="Static description")
    active_description: str | None = Field(default=None, description="Current progress text")
    result: str | None = Field(default=None, description="None while running")
    finished_at: datetime | None = Field(default=None, description="Completion time")
    final_task_reason: str | None = Field(default=None, description="Failure reason")
    final_task_messages: list[str] = Field(default_factory=list)

    @property
    def is_finished(self) -> bool:
        """Whether the workflow has a terminal result."""
        return self.result is not None

    @property
    def is_successful(self) -> bool:
        """Whether the workflow finished successfully."""
        return self.result == WORKFLOW_SUCCEEDED

    @property
    def message(self) -> str:
        """Human-readable terminal message.

        Successful workflows report their active description. Failed ones
        report the last final-task message, then the task's failure reason,
        then the workflow description.
        """
        if self.is_successful:
            return self.active_description or self.description or ""
        if self.final_task_messages:
            return self.final_task_messages[-1]
        if self.final_task_reason:
            return self.final_task_reason
        return self.description or ""

    @classmethod
    def from_api_response(cls, data: dict[str, Any], site_id: str | None = None) -> Workflow:
        """Create from a workflow response."""
        final_task = data.get("final_task") or {}
        messages = final_task.get("messages") or {}
        if isinstance(messages, dict):
            messages = list(messages.values())
        return cls(
            id=data["id"],
            site_id=data.get("site_id") or site_id or "",
            type=data.get("type"),
            description=data.get("description"),
            active_description=data.get("active_description"),
            result=data.get("result"),
            finished_at=data.get("finished_at"),
            final_task_reason=final_task.get("reason"),
            final_task_messages=[
                m["message"] if isinstance(m, dict) else str(m)
                for m in messages
                if not isinstance(m, dict) or m.get("message")
            ],
        )


class SessionInfo(BaseModel):
    """Response to a machine token exchange."""

    session: str
    user_id: str | None = None
    expires_at: datetime | None = None


class User(BaseModel):
    """The authenticated user."""

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> User:
        """Create from a ``users/{id}`` response."""
        profile = data.get("profile") or {}
        return cls(
            id=data["id"],
            email=data.get("email"),
            first_name=profile.get("firstname"),
            last_name=profile.get("lastname"),
        )
