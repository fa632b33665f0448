"""Unit tests for BackupManager."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from pytest_mock import MockerFixture

from site_operations_manager.services.plugins.backup import BackupManager


@pytest.fixture
def source(tmp_path: Path) -> Path:
    root = tmp_path / "source"
    (root / "vendor" / "acme").mkdir(parents=True)
    (root / "composer.json").write_text('{"require": {}}\n')
    (root / "vendor" / "acme" / "data.bin").write_bytes(bytes(range(256)))
    os.symlink("acme/data.bin", root / "vendor" / "link")
    return root


@pytest.mark.unit
@pytest.mark.plugins
class TestBackupManager:
    """Tests for backup, restore and discard."""

    def test_backup_copies_tree(
        self, tmp_path: Path, source: Path, snapshot: Callable[[Path], Any]
    ) -> None:
        manager = BackupManager(tmp_path / "backups")

        backup = manager.backup(source, "plugins")

        assert backup.parent == tmp_path / "backups" / "plugins"
        assert snapshot(backup) == snapshot(source)
        assert (backup / "vendor" / "link").is_symlink()

    def test_backups_do_not_collide(self, tmp_path: Path, source: Path) -> None:
        manager = BackupManager(tmp_path / "backups")
        assert manager.backup(source, "plugins") != manager.backup(source, "plugins")

    def test_restore_is_byte_for_byte(
        self, tmp_path: Path, source: Path, snapshot: Callable[[Path], Any]
    ) -> None:
        manager = BackupManager(tmp_path / "backups")
        before = snapshot(source)
        backup = manager.backup(source, "plugins")

        (source / "composer.json").write_text("changed")
        (source / "new.txt").write_text("extra")
        (source / "vendor" / "acme" / "data.bin").unlink()

        manager.restore(backup, source)

        assert snapshot(source) == before

    def test_restore_missing_target(
        self, tmp_path: Path, source: Path, snapshot: Callable[[Path], Any]
    ) -> None:
        manager = BackupManager(tmp_path / "backups")
        before = snapshot(source)
        backup = manager.backup(source, "plugins")
        os.rename(source, tmp_path / "moved")

        manager.restore(backup, source)

        assert snapshot(source) == before

    def test_backup_propagates_os_error(
        self, tmp_path: Path, source: Path, mocker: MockerFixture
    ) -> None:
        mocker.patch(
            "site_operations_manager.services.plugins.backup.shutil.copytree",
            side_effect=OSError("disk full"),
        )
        with pytest.raises(OSError, match="disk full"):
            BackupManager(tmp_path / "backups").backup(source, "plugins")

    def test_discard(self, tmp_path: Path, source: Path) -> None:
        manager = BackupManager(tmp_path / "backups")
        backup = manager.backup(source, "plugins")

        manager.discard(backup)

        assert not backup.exists()

    def test_discard_missing_backup(self, tmp_path: Path) -> None:
        BackupManager(tmp_path).discard(tmp_path / "gone")

    def test_discard_logs_failure(self, tmp_path: Path, source: Path, mocker: MockerFixture) -> None:
        manager = BackupManager(tmp_path / "backups")
        backup = manager.backup(source, "plugins")
        mocker.patch(
            "site_operations_manager.services.plugins.backup.shutil.rmtree",
            side_effect=PermissionError("denied"),
        )

        manager.discard(backup)

        assert backup.exists()
