"""Composer CLI wrapper for siteops plugin management.

Runs the composer binary via subprocess for the handful of operations the
plugin manager needs: remove, update and repository configuration.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

import structlog

from site_operations_manager.integrations.composer.models import ComposerCommandResult

logger = structlog.get_logger()

COMPOSER_TIMEOUT_SECONDS = 600
VERSION_TIMEOUT_SECONDS = 10


class ComposerError(Exception):
    """Base exception for Composer operations."""

    def __init__(self, message: str, stderr: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.stderr = stderr


class ComposerBinaryNotFoundError(ComposerError):
    """Raised when the composer binary is not available."""

    def __init__(self) -> None:
        super().__init__(
            message=(
                "Please install composer to enable plugin management. "
                "See https://getcomposer.org/download/."
            ),
        )


class ComposerCommandError(ComposerError):
    """Raised when composer cannot be executed or does not finish."""


class ComposerClient:
    """Client for the Composer CLI.

    Every operation returns a ``ComposerCommandResult``; only a missing
    binary, an exec failure or a timeout raise.
    """

    def __init__(
        self,
        binary_path: str | None = None,
        timeout: int = COMPOSER_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize Composer client.

        Args:
            binary_path: Optional explicit path to the composer binary.
                If None, searches PATH.
            timeout: Timeout in seconds for each composer invocation.

        Raises:
            ComposerBinaryNotFoundError: If the binary is not found.
        """
        self._binary = self._find_binary(binary_path)
        self._timeout = timeout
        self._log = logger.bind(binary=self._binary)
        self._log.debug("composer_client_initialized")

    @staticmethod
    def _find_binary(binary_path: str | None) -> str:
        """Locate the composer binary."""
        if binary_path:
            path = Path(binary_path).expanduser()
            if not path.exists():
                raise ComposerBinaryNotFoundError()
            return str(path.resolve())

        found = shutil.which("composer")
        if not found:
            raise ComposerBinaryNotFoundError()
        return found

    @property
    def binary(self) -> str:
        """Resolved path of the composer binary."""
        return self._binary

    def _run(
        self,
        args: list[str],
        *,
        directory: Path | None = None,
        timeout: int | None = None,
    ) -> ComposerCommandResult:
        """Run a composer command.

        Args:
            args: Command arguments (without the ``composer`` prefix).
            directory: Working directory passed via ``-d``, for logging.
            timeout: Timeout in seconds, defaults to the client timeout.

        Raises:
            ComposerCommandError: If composer cannot be started or times out.
        """
        cmd = [self._binary, *args]
        limit = timeout or self._timeout
        self._log.debug("running_composer_command", args=args)

        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=limit,
            )
        except subprocess.TimeoutExpired as e:
            raise ComposerCommandError(
                message=f"Composer command timed out after {limit}s",
            ) from e
        except OSError as e:
            raise ComposerCommandError(message=f"Failed to run composer: {e}") from e

        result = ComposerCommandResult(
            args=args,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            directory=str(directory) if directory else None,
        )
        if not result.succeeded:
            self._log.warning(
                "composer_command_failed",
                args=args,
                exit_code=result.exit_code,
                stderr=result.stderr.strip(),
            )
        return result

    def get_version(self) -> str:
        """Return the composer version string, e.g. ``2.7.1``.

        Raises:
            ComposerCommandError: If the version cannot be determined.
        """
        result = self._run(["--version", "--no-ansi"], timeout=VERSION_TIMEOUT_SECONDS)
        if not result.succeeded:
            raise ComposerCommandError(
                message=f"composer --version exited with {result.exit_code}",
                stderr=result.stderr,
            )
        # "Composer version 2.7.1 2024-02-09 15:26:28"
        parts = result.stdout.split()
        for index, part in enumerate(parts):
            if part.lower() == "version" and index + 1 < len(parts):
                return parts[index + 1]
        return result.stdout.strip()

    def remove(self, directory: Path, package: str) -> ComposerCommandResult:
        """Run ``composer remove -d <directory> <package>``."""
        return self._run(["remove", "-d", str(directory), package], directory=directory)

    def update(self, directory: Path) -> ComposerCommandResult:
        """Run ``composer update -d <directory>``."""
        return self._run(["update", "-d", str(directory)], directory=directory)

    def unset_repository(self, directory: Path, package: str) -> ComposerCommandResult:
        """Remove the ``repositories.<package>`` entry from a manifest."""
        return self._run(
            ["config", "-d", str(directory), "--unset", f"repositories.{package}"],
            directory=directory,
        )
