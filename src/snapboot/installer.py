# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/installer.py

"""Content-addressed installation onto the ESP with rollback.

All writes to the ESP go through an ``InstallTransaction``. Every
destination it touches is recorded together with a backup of whatever
was there before, so a failing install can be undone completely.
"""

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .errors import InstallError

logger = logging.getLogger(__name__)

FILE_MODE = 0o644


class InstallTransaction:
    """Destinations written during one install, with their backups."""

    def __init__(self, staging_dir: Path):
        self.staging_dir = Path(staging_dir)
        self.touched: list[tuple[Path, Path | None]] = []

    def _backup(self, destination: Path) -> Path:
        fd, name = tempfile.mkstemp(prefix="backup-", dir=self.staging_dir)
        os.close(fd)
        shutil.copy2(destination, name)
        return Path(name)

    def install(self, source: Path, destination: Path) -> None:
        """Copy ``source`` to ``destination`` world-readable and root-owned."""
        source = Path(source)
        destination = Path(destination)
        tmp_path = None
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            backup = self._backup(destination) if destination.exists() else None
            self.touched.append((destination, backup))

            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{destination.name}.", dir=destination.parent
            )
            os.close(fd)
            tmp_path = Path(tmp_name)
            shutil.copyfile(source, tmp_path)
            os.chmod(tmp_path, FILE_MODE)
            if os.geteuid() == 0:
                os.chown(tmp_path, 0, 0)
            os.replace(tmp_path, destination)
            tmp_path = None
        except OSError as e:
            raise InstallError(f"Could not install {source} to {destination}: {e}") from e
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
        logger.info("Installed %s", destination)

    def write_text(self, destination: Path, text: str) -> None:
        """Install rendered ``text`` as ``destination``."""
        try:
            fd, name = tempfile.mkstemp(prefix="text-", dir=self.staging_dir)
            with os.fdopen(fd, "w") as f:
                f.write(text)
        except OSError as e:
            raise InstallError(f"Could not stage {destination}: {e}") from e
        self.install(Path(name), destination)

    def commit(self) -> None:
        for _, backup in self.touched:
            if backup is not None:
                backup.unlink(missing_ok=True)
        self.touched.clear()

    def rollback(self) -> None:
        """Restore every touched destination; failures are only logged."""
        for destination, backup in reversed(self.touched):
            try:
                if backup is not None:
                    os.replace(backup, destination)
                    logger.info("Restored %s", destination)
                else:
                    destination.unlink(missing_ok=True)
                    logger.info("Removed %s", destination)
            except OSError as e:
                logger.error("Could not roll back %s: %s", destination, e)
        self.touched.clear()


@contextmanager
def install_transaction(staging_dir: Path) -> Iterator[InstallTransaction]:
    """Commit on normal exit, roll back on any exception."""
    txn = InstallTransaction(staging_dir)
    try:
        yield txn
    except BaseException:
        txn.rollback()
        raise
    txn.commit()
