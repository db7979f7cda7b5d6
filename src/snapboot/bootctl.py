# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/bootctl.py

"""Boot manager access through systemd's bootctl."""

import json
import logging
import subprocess
from pathlib import Path

from .errors import BootManagerError
from .types import BootEntry

logger = logging.getLogger(__name__)

ENTRY_SUFFIX = ".conf"


def strip_suffix(bootctl_id: str) -> str:
    if bootctl_id.endswith(ENTRY_SUFFIX):
        return bootctl_id[:-len(ENTRY_SUFFIX)]
    return bootctl_id


def entry_from_record(record: dict) -> BootEntry:
    """Build a BootEntry from one ``bootctl list --json`` record."""
    initrd = record.get("initrd")
    if isinstance(initrd, list):
        initrd = initrd[0] if initrd else None

    snapshot = kernel_version = None
    version = record.get("version") or ""
    if "@" in version:
        snapshot, _, kernel_version = version.partition("@")

    return BootEntry(
        id=strip_suffix(record["id"]),
        options=record.get("options") or "",
        linux=record.get("linux"),
        initrd=initrd,
        title=record.get("title") or record.get("showTitle") or "",
        kernel_version=kernel_version,
        snapshot=snapshot,
        is_default=bool(record.get("isDefault")),
        is_reported=bool(record.get("isReported")),
        sort_key=record.get("sortKey"),
        machine_id=record.get("machineId"),
        path=record.get("path"),
        type=record.get("type"),
    )


class Bootctl:
    """List and mutate boot entries on one ESP."""

    def __init__(self, esp: Path | str):
        self.esp = Path(esp)

    def _run(self, *args: str) -> str:
        cmd = ["bootctl", f"--esp-path={self.esp}", *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, check=True, text=True)
        except FileNotFoundError as e:
            raise BootManagerError("bootctl not found") from e
        except subprocess.CalledProcessError as e:
            raise BootManagerError(f"bootctl {args[0]} failed: {e.stderr.strip()}") from e
        return result.stdout

    def list_entries(self) -> list[BootEntry]:
        output = self._run("list", "--json=short")
        try:
            records = json.loads(output or "[]")
        except json.JSONDecodeError as e:
            raise BootManagerError(f"Unparsable bootctl output: {e}") from e
        return [entry_from_record(r) for r in records]

    def set_default(self, entry_id: str) -> None:
        self._run("set-default", entry_id + ENTRY_SUFFIX)
        logger.info("Default entry is now %s", entry_id)

    def set_oneshot(self, entry_id: str) -> None:
        self._run("set-oneshot", entry_id + ENTRY_SUFFIX)
        logger.info("Next boot uses %s", entry_id)

    def unlink(self, entry_id: str) -> None:
        self._run("unlink", entry_id + ENTRY_SUFFIX)
        logger.info("Removed entry %s", entry_id)
