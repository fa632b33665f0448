"""Unit tests for self plugin commands."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import typer
from typer.testing import CliRunner

from site_operations_manager.plugins.self_management.commands import register_plugin_commands
from site_operations_manager.services.plugins.exceptions import (
    PluginRequirementsError,
    PluginRestoreError,
)
from site_operations_manager.services.plugins.models import (
    PluginInfo,
    UninstallResult,
    UninstallState,
)

DONE = UninstallResult("hello", UninstallState.DONE, "hello was removed successfully.")
MISSING = UninstallResult("ghost", UninstallState.NOT_INSTALLED, "ghost is not installed.")
ROLLED_BACK = UninstallResult(
    "broken",
    UninstallState.ROLLED_BACK,
    "Error removing broken from the dependencies directory.",
    exit_code=2,
    failed_at=UninstallState.DEPENDENCIES_UPDATED,
)


def reporting(results: list[UninstallResult]) -> Callable[..., list[UninstallResult]]:
    """Fake uninstall_many that reports ``results`` through on_result."""

    def uninstall_many(projects: Iterable[str], on_result: Callable[..., None]) -> list:
        for result in results:
            on_result(result)
        return results

    return uninstall_many


@pytest.fixture
def app(get_lifecycle_manager: Callable[[], MagicMock]) -> typer.Typer:
    """Create a test app with self plugin commands."""
    app = typer.Typer()
    register_plugin_commands(app, get_lifecycle_manager)
    return app


@pytest.mark.unit
@pytest.mark.plugins
class TestListCommand:
    """Tests for self plugin list."""

    def test_lists_plugins(
        self, cli_runner: CliRunner, app: typer.Typer, mock_lifecycle_manager: MagicMock
    ) -> None:
        mock_lifecycle_manager.list_plugins.return_value = [
            PluginInfo(name="acme/hello", path=Path("/p"), version="1.0.0", description="Hi")
        ]

        result = cli_runner.invoke(app, ["self", "plugin", "list"])

        assert result.exit_code == 0
        assert "Installed Plugins" in result.output
        assert "acme/hello" in result.output
        assert "1.0.0" in result.output

    def test_no_plugins(
        self, cli_runner: CliRunner, app: typer.Typer, mock_lifecycle_manager: MagicMock
    ) -> None:
        mock_lifecycle_manager.list_plugins.return_value = []

        result = cli_runner.invoke(app, ["self:plugin:list"])

        assert result.exit_code == 0
        assert "No plugins installed." in result.output


@pytest.mark.unit
@pytest.mark.plugins
class TestUninstallCommand:
    """Tests for self plugin uninstall and its aliases."""

    def test_requires_a_project(
        self, cli_runner: CliRunner, app: typer.Typer, mock_lifecycle_manager: MagicMock
    ) -> None:
        result = cli_runner.invoke(app, ["self", "plugin", "uninstall"])

        assert result.exit_code == 1
        assert "At least one plugin project is required." in result.output
        assert "siteops self plugin <uninstall|remove> <project> [project 2] ..." in result.output
        mock_lifecycle_manager.check_requirements.assert_not_called()

    def test_reports_each_result(
        self, cli_runner: CliRunner, app: typer.Typer, mock_lifecycle_manager: MagicMock
    ) -> None:
        mock_lifecycle_manager.uninstall_many.side_effect = reporting([DONE, MISSING])

        result = cli_runner.invoke(app, ["self", "plugin", "uninstall", "hello", "ghost"])

        assert result.exit_code == 0
        mock_lifecycle_manager.check_requirements.assert_called_once()
        assert mock_lifecycle_manager.uninstall_many.call_args.args[0] == ["hello", "ghost"]
        assert "hello was removed successfully." in result.output
        assert "ghost is not installed." in result.output

    def test_reports_rollback(
        self, cli_runner: CliRunner, app: typer.Typer, mock_lifecycle_manager: MagicMock
    ) -> None:
        kept = UninstallResult(
            ROLLED_BACK.project,
            ROLLED_BACK.state,
            ROLLED_BACK.message,
            exit_code=ROLLED_BACK.exit_code,
            backups=[Path("/backups/plugins/20260101000000-abcd1234")],
        )
        mock_lifecycle_manager.uninstall_many.side_effect = reporting([kept])

        result = cli_runner.invoke(app, ["self", "plugin", "uninstall", "broken"])

        assert result.exit_code == 0
        assert "Error removing broken from the dependencies directory." in result.output
        assert "Composer exited with code 2" in result.output
        assert "restored from backup" in result.output
        assert "Backup kept at /backups/plugins/20260101000000-abcd1234" in result.output

    @pytest.mark.parametrize(
        "command",
        [
            ["self", "plugin", "remove", "hello"],
            ["self", "plugin", "rm", "hello"],
            ["self", "plugin", "delete", "hello"],
            ["self:plugin:uninstall", "hello"],
            ["self:plugin:remove", "hello"],
        ],
    )
    def test_aliases(
        self,
        cli_runner: CliRunner,
        app: typer.Typer,
        mock_lifecycle_manager: MagicMock,
        command: list[str],
    ) -> None:
        mock_lifecycle_manager.uninstall_many.side_effect = reporting([DONE])

        result = cli_runner.invoke(app, command)

        assert result.exit_code == 0
        assert "hello was removed successfully." in result.output

    def test_missing_composer(
        self, cli_runner: CliRunner, app: typer.Typer, mock_lifecycle_manager: MagicMock
    ) -> None:
        mock_lifecycle_manager.check_requirements.side_effect = PluginRequirementsError(
            "Please install composer to enable plugin management."
        )

        result = cli_runner.invoke(app, ["self", "plugin", "uninstall", "hello"])

        assert result.exit_code == 1
        assert "Please install composer" in result.output
        mock_lifecycle_manager.uninstall_many.assert_not_called()

    def test_restore_failure(
        self, cli_runner: CliRunner, app: typer.Typer, mock_lifecycle_manager: MagicMock
    ) -> None:
        mock_lifecycle_manager.uninstall_many.side_effect = PluginRestoreError(
            "Could not restore /plugins after failing to remove hello.",
            backups=[Path("/backups/plugins/1"), Path("/backups/dependencies/1")],
        )

        result = cli_runner.invoke(app, ["self", "plugin", "uninstall", "hello"])

        assert result.exit_code == 1
        assert "could not be restored" in result.output
        assert "/backups/plugins/1" in result.output
        assert "/backups/dependencies/1" in result.output

    def test_aliases_hidden_from_help(self, cli_runner: CliRunner, app: typer.Typer) -> None:
        result = cli_runner.invoke(app, ["self", "plugin", "--help"])

        assert result.exit_code == 0
        assert "uninstall" in result.output
        assert "delete" not in result.output
