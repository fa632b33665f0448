"""Shared pytest fixtures for site_operations_manager tests."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from site_operations_manager.cli.main import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(
        """
version: "1.0"
environment: staging
profiles:
  default:
    debug: true
plugins:
  enabled: [hosting, self]
  hosting:
    poll_interval: 1
  self:
    keep_backups: true
"""
    )
    return config_path


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    # Clear any SITEOPS_ prefixed environment variables
    for key in list(os.environ.keys()):
        if key.startswith("SITEOPS_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def capture_logs(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Fixture to capture log output."""
    import logging

    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def cli_app() -> typer.Typer:
    """Return the CLI app for testing."""
    return app
