"""Shared fixtures for self-management plugin tests."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest
from pytest_mock import MockerFixture
from rich.console import Console


@pytest.fixture(autouse=True)
def wide_console(mocker: MockerFixture) -> Console:
    """Print command output without wrapping."""
    console = Console(width=200)
    mocker.patch("site_operations_manager.plugins.self_management.commands.console", console)
    return console


@pytest.fixture
def mock_lifecycle_manager() -> MagicMock:
    """Create a mock PluginLifecycleManager."""
    return MagicMock()


@pytest.fixture
def get_lifecycle_manager(mock_lifecycle_manager: MagicMock) -> Callable[[], MagicMock]:
    """Create a factory function that returns the mock PluginLifecycleManager."""
    return lambda: mock_lifecycle_manager
