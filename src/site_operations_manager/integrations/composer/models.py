"""Data models for Composer invocations."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ComposerCommandResult:
    """Outcome of one composer invocation.

    Non-zero exits are reported here rather than raised so callers can
    decide whether a failure is fatal.
    """

    args: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    directory: str | None = field(default=None)

    @property
    def succeeded(self) -> bool:
        """Whether composer exited with status 0."""
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        """The invocation as a single display string."""
        return " ".join(["composer", *self.args])
