"""Install-state management for siteops plugins.

Plugins are Composer packages installed into ``plugins_dir``. Their shared
dependencies are resolved separately into ``dependencies_dir``. Removing a
plugin touches both, so every removal is wrapped in a backup of the two
directories and rolled back if any composer step fails.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

from site_operations_manager.integrations.composer.client import (
    ComposerBinaryNotFoundError,
    ComposerClient,
    ComposerCommandError,
)
from site_operations_manager.services.plugins.backup import BackupManager
from site_operations_manager.services.plugins.exceptions import (
    PluginRequirementsError,
    PluginRestoreError,
)
from site_operations_manager.services.plugins.models import (
    PLUGIN_PACKAGE_TYPE,
    PluginInfo,
    UninstallResult,
    UninstallState,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from site_operations_manager.integrations.composer.models import ComposerCommandResult
    from site_operations_manager.services.plugins.config import PluginManagerConfig

logger = structlog.get_logger()

MANIFEST_FILE = "composer.json"

NOT_INSTALLED_MESSAGE = "{project} is not installed."
SUCCESS_MESSAGE = "{project} was removed successfully."
BACKUP_FAILED_MESSAGE = "Could not back up plugin directories before removing {project}: {error}"

ResultCallback = Callable[[UninstallResult], None]


class PluginLifecycleManager:
    """Finds installed plugins and removes them with rollback on failure."""

    def __init__(
        self,
        config: PluginManagerConfig,
        composer: ComposerClient | None = None,
        backups: BackupManager | None = None,
    ) -> None:
        """Initialize the lifecycle manager.

        Args:
            config: Plugin directories and composer settings.
            composer: Composer client; created from ``config`` on first use.
            backups: Backup manager; defaults to one rooted at
                ``config.backups_dir``.
        """
        self._config = config
        self._composer = composer
        self._backups = backups or BackupManager(config.backups_dir)
        self._log = logger.bind(entity="plugin")

    @property
    def config(self) -> PluginManagerConfig:
        """Active plugin management configuration."""
        return self._config

    @property
    def composer(self) -> ComposerClient:
        """Composer client, located on first access.

        Raises:
            ComposerBinaryNotFoundError: If composer is not installed.
        """
        if self._composer is None:
            self._composer = ComposerClient(
                binary_path=self._config.composer_binary,
                timeout=self._config.command_timeout,
            )
        return self._composer

    # -----------------------------------------------------------------------
    # Requirements
    # -----------------------------------------------------------------------

    def check_requirements(self) -> None:
        """Verify composer is available and both plugin directories exist.

        Missing directories and manifests are created.

        Raises:
            PluginRequirementsError: If plugin commands cannot run.
        """
        try:
            composer = self.composer
        except ComposerBinaryNotFoundError as e:
            raise PluginRequirementsError(e.message) from e
        self._log.debug("composer_found", binary=composer.binary)

        for directory, package in (
            (self._config.plugins_dir, "siteops/plugins"),
            (self._config.dependencies_dir, "siteops/dependencies"),
        ):
            try:
                directory.mkdir(parents=True, exist_ok=True)
                self._ensure_manifest(directory, package)
            except OSError as e:
                raise PluginRequirementsError(
                    f"Cannot prepare plugin directory {directory}",
                    details=str(e),
                ) from e

    @staticmethod
    def _ensure_manifest(directory: Path, package: str) -> None:
        manifest = directory / MANIFEST_FILE
        if manifest.exists():
            return
        manifest.write_text(
            json.dumps(
                {"name": package, "type": "project", "require": {}, "repositories": {}},
                indent=4,
            )
            + "\n"
        )

    # -----------------------------------------------------------------------
    # Discovery
    # -----------------------------------------------------------------------

    def list_plugins(self) -> list[PluginInfo]:
        """Scan ``plugins_dir`` for installed plugin packages."""
        vendor_dir = self._config.plugins_dir / "vendor"
        if not vendor_dir.is_dir():
            return []

        plugins = []
        for manifest in sorted(vendor_dir.glob(f"*/*/{MANIFEST_FILE}")):
            try:
                data = json.loads(manifest.read_text())
            except (OSError, ValueError) as e:
                self._log.warning("unreadable_plugin_manifest", path=str(manifest), error=str(e))
                continue
            if not isinstance(data, dict) or data.get("type") != PLUGIN_PACKAGE_TYPE:
                continue
            plugins.append(PluginInfo.from_manifest(manifest.parent, data))

        self._log.debug("listed_plugins", count=len(plugins))
        return plugins

    def find_plugin(self, project: str) -> PluginInfo | None:
        """Return the installed plugin matching ``project``, or None."""
        for plugin in self.list_plugins():
            if plugin.matches(project):
                return plugin
        return None

    # -----------------------------------------------------------------------
    # Uninstall
    # -----------------------------------------------------------------------

    def uninstall_many(
        self,
        projects: Iterable[str],
        on_result: ResultCallback | None = None,
    ) -> list[UninstallResult]:
        """Remove each project in turn; one failure does not stop the rest.

        Raises:
            PluginRestoreError: If a rollback could not be completed.
        """
        results = []
        for project in projects:
            result = self.uninstall(project)
            results.append(result)
            if on_result is not None:
                on_result(result)
        return results

    def uninstall(self, project: str) -> UninstallResult:
        """Remove one plugin.

        Returns:
            The outcome. ``DONE`` on success, ``NOT_INSTALLED`` if no such
            plugin exists, ``BACKUP_FAILED`` if nothing was touched because
            the backup failed, and ``ROLLED_BACK`` if a composer step failed
            and both directories were restored.

        Raises:
            PluginRestoreError: If a rollback could not be completed.
        """
        log = self._log.bind(project=project)
        plugin = self.find_plugin(project)
        if plugin is None:
            log.warning("plugin_not_installed")
            return UninstallResult(
                project=project,
                state=UninstallState.NOT_INSTALLED,
                message=NOT_INSTALLED_MESSAGE.format(project=project),
            )

        plugins_dir = self._config.plugins_dir
        dependencies_dir = self._config.dependencies_dir

        backups: dict[Path, Path] = {}
        try:
            backups[plugins_dir] = self._backups.backup(plugins_dir, "plugins")
            backups[dependencies_dir] = self._backups.backup(dependencies_dir, "dependencies")
        except OSError as e:
            log.error("plugin_backup_failed", error=str(e))
            for backup in backups.values():
                self._backups.discard(backup)
            return UninstallResult(
                project=project,
                state=UninstallState.BACKUP_FAILED,
                message=BACKUP_FAILED_MESSAGE.format(project=project, error=e),
                plugin=plugin,
                failed_at=UninstallState.PENDING,
            )
        state = UninstallState.BACKED_UP

        package = plugin.name
        steps: list[tuple[UninstallState, Callable[[], ComposerCommandResult], str]] = [
            (
                UninstallState.DEPENDENCIES_UPDATED,
                lambda: self.composer.update(dependencies_dir),
                "Error updating dependencies before removing {project}.",
            ),
            (
                UninstallState.REMOVED_FROM_DEPS,
                lambda: self.composer.remove(dependencies_dir, package),
                "Error removing {project} from the dependencies directory.",
            ),
            (
                UninstallState.REPO_DEREGISTERED,
                lambda: self.composer.unset_repository(dependencies_dir, package),
                "Error removing the {project} repository from the dependencies manifest.",
            ),
            (
                UninstallState.REMOVED_FROM_PLUGIN_DIR,
                lambda: self.composer.remove(plugins_dir, package),
                "Error removing {project} from the plugins directory.",
            ),
        ]

        for next_state, run_step, error_template in steps:
            try:
                outcome = run_step()
            except ComposerCommandError as e:
                log.error("plugin_step_failed", step=next_state.value, error=e.message)
                message = f"{error_template.format(project=project)} {e.message}"
                return self._roll_back(plugin, project, state, backups, message, None)
            if not outcome.succeeded:
                log.error(
                    "plugin_step_failed",
                    step=next_state.value,
                    exit_code=outcome.exit_code,
                    stderr=outcome.stderr.strip(),
                )
                return self._roll_back(
                    plugin,
                    project,
                    state,
                    backups,
                    error_template.format(project=project),
                    outcome.exit_code,
                )
            state = next_state
            log.debug("plugin_step_completed", step=state.value)

        kept = self._finish_backups(backups)
        log.info("plugin_uninstalled", package=package)
        return UninstallResult(
            project=project,
            state=UninstallState.DONE,
            message=SUCCESS_MESSAGE.format(project=project),
            plugin=plugin,
            backups=kept,
        )

    def _roll_back(
        self,
        plugin: PluginInfo,
        project: str,
        reached: UninstallState,
        backups: dict[Path, Path],
        message: str,
        exit_code: int | None,
    ) -> UninstallResult:
        """Restore every backed up directory and describe the failure."""
        for target, backup in backups.items():
            try:
                self._backups.restore(backup, target)
            except OSError as e:
                self._log.critical(
                    "plugin_restore_failed",
                    project=project,
                    target=str(target),
                    backup=str(backup),
                    error=str(e),
                )
                raise PluginRestoreError(
                    f"Could not restore {target} after failing to remove {project}.",
                    backups=list(backups.values()),
                    details=f"Restore manually from {backup}: {e}",
                ) from e

        kept = self._finish_backups(backups)
        self._log.warning("plugin_rolled_back", project=project, failed_after=reached.value)
        return UninstallResult(
            project=project,
            state=UninstallState.ROLLED_BACK,
            message=message,
            plugin=plugin,
            exit_code=exit_code,
            failed_at=reached,
            backups=kept,
        )

    def _finish_backups(self, backups: dict[Path, Path]) -> list[Path]:
        """Discard backups unless configured to keep them; return the kept ones."""
        if self._config.keep_backups:
            return list(backups.values())
        for backup in backups.values():
            self._backups.discard(backup)
        return []
