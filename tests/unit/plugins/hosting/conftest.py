"""Shared fixtures for hosting plugin tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture
from rich.console import Console

from site_operations_manager.integrations.hosting.config import HostingConfig, HostingSession


@pytest.fixture(autouse=True)
def wide_console(mocker: MockerFixture) -> Console:
    """Print command output without wrapping."""
    console = Console(width=200)
    for module in ("base", "env", "auth"):
        mocker.patch(
            f"site_operations_manager.plugins.hosting.commands.{module}.console",
            console,
        )
    return console


@pytest.fixture
def session_path(tmp_path: Path, mocker: MockerFixture) -> Path:
    """Redirect the saved session file into the test directory."""
    path = tmp_path / "config" / "session.yaml"
    mocker.patch.object(HostingSession, "get_session_path", return_value=path)
    return path


@pytest.fixture
def hosting_config() -> HostingConfig:
    return HostingConfig(base_url="https://api.example.test/api", retries=1)


@pytest.fixture
def mock_environment_manager() -> MagicMock:
    """Create a mock EnvironmentManager."""
    return MagicMock()


@pytest.fixture
def get_environment_manager(mock_environment_manager: MagicMock) -> Callable[[], MagicMock]:
    """Create a factory function that returns the mock EnvironmentManager."""
    return lambda: mock_environment_manager
