"""Directory backups taken around plugin mutations."""

from __future__ import annotations

import shutil
import uuid
from datetime import datetime
from pathlib import Path

import structlog

logger = structlog.get_logger()


class BackupManager:
    """Creates, restores and discards full directory copies.

    Backups live under ``<backups_dir>/<label>/<timestamp>-<suffix>`` so two
    operations in the same second never share a directory.
    """

    def __init__(self, backups_dir: Path) -> None:
        self._backups_dir = backups_dir
        self._log = logger.bind(entity="backup")

    @property
    def backups_dir(self) -> Path:
        """Root directory for backups."""
        return self._backups_dir

    def backup(self, source: Path, label: str) -> Path:
        """Copy ``source`` to a new backup directory.

        Raises:
            OSError: If the copy fails.
        """
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        destination = self._backups_dir / label / f"{stamp}-{uuid.uuid4().hex[:8]}"
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, destination, symlinks=True)
        self._log.debug("directory_backed_up", source=str(source), backup=str(destination))
        return destination

    def restore(self, backup: Path, target: Path) -> None:
        """Replace ``target`` with the contents of ``backup``.

        Raises:
            OSError: If the target cannot be removed or the copy fails.
        """
        if target.is_symlink() or target.is_file():
            target.unlink()
        elif target.exists():
            shutil.rmtree(target)
        shutil.copytree(backup, target, symlinks=True)
        self._log.info("directory_restored", backup=str(backup), target=str(target))

    def discard(self, backup: Path) -> None:
        """Delete a backup directory, logging rather than raising on failure."""
        try:
            shutil.rmtree(backup)
        except FileNotFoundError:
            return
        except OSError as e:
            self._log.warning("backup_discard_failed", backup=str(backup), error=str(e))
            return
        self._log.debug("backup_discarded", backup=str(backup))
