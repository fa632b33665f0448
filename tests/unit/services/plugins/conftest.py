"""Shared fixtures for plugin management service tests.

Plugins are laid out the way composer leaves them: a manifest at the root of
each directory and packages under ``vendor/<vendor>/<name>``. The fake
composer edits those files so rollbacks can be checked against real trees.
"""

from __future__ import annotations

import json
import os
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from site_operations_manager.integrations.composer.client import ComposerCommandError
from site_operations_manager.integrations.composer.models import ComposerCommandResult
from site_operations_manager.services.plugins.config import PluginManagerConfig

Snapshot = dict[str, Any]


class FakeComposer:
    """Stand-in for ComposerClient that edits plugin trees on disk.

    ``fail`` maps ``(operation, directory)`` to an exit code. The failing
    step still deletes the package first, like an interrupted composer run.
    """

    binary = "/usr/bin/composer"

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.fail: dict[tuple[str, Path], int] = {}
        self.error: dict[tuple[str, Path], str] = {}

    def _outcome(self, operation: str, directory: Path, args: list[str]) -> ComposerCommandResult:
        key = (operation, directory)
        if key in self.error:
            raise ComposerCommandError(self.error[key])
        exit_code = self.fail.get(key, 0)
        return ComposerCommandResult(
            args=args,
            exit_code=exit_code,
            stderr="Your requirements could not be resolved" if exit_code else "",
            directory=str(directory),
        )

    def update(self, directory: Path) -> ComposerCommandResult:
        self.calls.append(("update", directory))
        (directory / "composer.lock").write_text('{"content-hash": "updated"}\n')
        return self._outcome("update", directory, ["update", "-d", str(directory)])

    def remove(self, directory: Path, package: str) -> ComposerCommandResult:
        self.calls.append(("remove", directory, package))
        package_dir = directory / "vendor" / package
        if package_dir.exists():
            shutil.rmtree(package_dir)
        manifest = _read_manifest(directory)
        manifest.get("require", {}).pop(package, None)
        _write_manifest(directory, manifest)
        return self._outcome("remove", directory, ["remove", "-d", str(directory), package])

    def unset_repository(self, directory: Path, package: str) -> ComposerCommandResult:
        self.calls.append(("unset_repository", directory, package))
        manifest = _read_manifest(directory)
        manifest.get("repositories", {}).pop(package, None)
        _write_manifest(directory, manifest)
        return self._outcome(
            "unset_repository",
            directory,
            ["config", "-d", str(directory), "--unset", f"repositories.{package}"],
        )


def _read_manifest(directory: Path) -> dict[str, Any]:
    return json.loads((directory / "composer.json").read_text())


def _write_manifest(directory: Path, data: dict[str, Any]) -> None:
    (directory / "composer.json").write_text(json.dumps(data, indent=4) + "\n")


def install_plugin(
    plugins_dir: Path,
    dependencies_dir: Path,
    package: str,
    package_type: str = "siteops-plugin",
) -> Path:
    """Lay out an installed package in both directories."""
    package_dir = plugins_dir / "vendor" / package
    (package_dir / "src").mkdir(parents=True)
    (package_dir / "src" / "Plugin.php").write_text("<?php\n// plugin code\n")
    (package_dir / "composer.json").write_text(
        json.dumps(
            {
                "name": package,
                "type": package_type,
                "version": "1.2.0",
                "description": f"{package} for tests",
            }
        )
    )

    deps_package = dependencies_dir / "vendor" / package
    deps_package.mkdir(parents=True)
    (deps_package / "autoload.php").write_bytes(b"<?php\x00\xff binary-ish\n")

    for directory in (plugins_dir, dependencies_dir):
        manifest = _read_manifest(directory)
        manifest["require"][package] = "^1.2"
        if directory == dependencies_dir:
            manifest["repositories"][package] = {"type": "path", "url": str(package_dir)}
        _write_manifest(directory, manifest)
    return package_dir


def snapshot_tree(root: Path) -> Snapshot:
    """Capture every entry under ``root`` including file bytes and links."""
    entries: Snapshot = {}
    for path in sorted(root.rglob("*")):
        key = str(path.relative_to(root))
        if path.is_symlink():
            entries[key] = ("link", os.readlink(path))
        elif path.is_dir():
            entries[key] = ("dir",)
        else:
            entries[key] = ("file", path.read_bytes())
    return entries


@pytest.fixture
def plugin_config(tmp_path: Path) -> PluginManagerConfig:
    """Plugin directories with empty manifests and a bin symlink."""
    config = PluginManagerConfig(
        plugins_dir=tmp_path / "plugins",
        dependencies_dir=tmp_path / "dependencies",
        backups_dir=tmp_path / "backups",
    )
    for directory, name in (
        (config.plugins_dir, "siteops/plugins"),
        (config.dependencies_dir, "siteops/dependencies"),
    ):
        directory.mkdir()
        _write_manifest(
            directory, {"name": name, "type": "project", "require": {}, "repositories": {}}
        )
    (config.plugins_dir / "vendor" / "bin").mkdir(parents=True)
    os.symlink("../acme/hello-plugin/bin/hello", config.plugins_dir / "vendor" / "bin" / "hello")
    return config


@pytest.fixture
def installed(plugin_config: PluginManagerConfig) -> Callable[..., Path]:
    """Install a package into the configured plugin directories."""

    def _install(package: str, package_type: str = "siteops-plugin") -> Path:
        return install_plugin(
            plugin_config.plugins_dir,
            plugin_config.dependencies_dir,
            package,
            package_type,
        )

    return _install


@pytest.fixture
def fake_composer() -> FakeComposer:
    return FakeComposer()


@pytest.fixture
def snapshot() -> Callable[[Path], Snapshot]:
    return snapshot_tree
