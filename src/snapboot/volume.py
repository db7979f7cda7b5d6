# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/volume.py

"""Btrfs and mount metadata of the root filesystem."""

import logging
import re
import subprocess
from pathlib import Path

from .errors import ConfigurationError, VolumeError

logger = logging.getLogger(__name__)

SNAPSHOT_PATTERN = re.compile(r"(^|/)\.snapshots/(\d+)/snapshot$")


def snapshot_number(subvolume: str) -> int | None:
    """Snapshot number of a snapper subvolume path, if it is one."""
    match = SNAPSHOT_PATTERN.search(subvolume.strip().strip("/"))
    return int(match.group(2)) if match else None


def parse_subvolume_show(output: str) -> tuple[str, dict[str, str]]:
    """Split ``btrfs subvolume show`` output into its path and fields."""
    lines = output.splitlines()
    if not lines:
        raise VolumeError("Empty output from btrfs subvolume show")
    path = lines[0].strip()
    fields = {}
    for line in lines[1:]:
        key, sep, value = line.strip().partition(":")
        if sep:
            fields[key.strip()] = value.strip()
    return path, fields


class BtrfsVolume:
    """Queries against the btrfs filesystem mounted at ``sysroot``."""

    def __init__(self, sysroot: Path | str = "/"):
        self.sysroot = Path(sysroot)
        self._root_subvolume = None

    def _run(self, cmd: list[str]) -> str:
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(cmd, capture_output=True, check=True, text=True)
        except FileNotFoundError as e:
            raise VolumeError(f"{cmd[0]} not found") from e
        except subprocess.CalledProcessError as e:
            raise VolumeError(f"{' '.join(cmd)} failed: {e.stderr.strip()}") from e
        return result.stdout

    def root_uuid(self) -> str:
        uuid = self._run(["findmnt", "--mountpoint", str(self.sysroot),
                          "-n", "-r", "-o", "UUID"]).strip()
        if not uuid:
            raise ConfigurationError("Could not determine root filesystem UUID")
        return uuid

    def root_subvolume(self) -> str:
        if self._root_subvolume is None:
            fsroot = self._run(["findmnt", "--mountpoint", str(self.sysroot),
                                "-n", "-r", "-o", "FSROOT"]).strip()
            self._root_subvolume = fsroot.lstrip("/")
        return self._root_subvolume

    def root_snapshot(self) -> int:
        subvolume = self.root_subvolume()
        number = snapshot_number(subvolume)
        if number is None:
            raise ConfigurationError(f"Root subvolume {subvolume} is not a snapshot")
        return number

    def subvolume_for(self, number: int) -> str:
        """Subvolume path of snapshot ``number``, e.g. ``@/.snapshots/5/snapshot``."""
        prefix = SNAPSHOT_PATTERN.sub("", self.root_subvolume())
        relative = f".snapshots/{number}/snapshot"
        return f"{prefix}/{relative}" if prefix else relative

    def snapshot_path(self, number: int) -> Path:
        return self.sysroot / ".snapshots" / str(number) / "snapshot"

    def _show(self, number: int) -> dict[str, str]:
        _, fields = parse_subvolume_show(
            self._run(["btrfs", "subvolume", "show", str(self.snapshot_path(number))])
        )
        return fields

    def parent_snapshot(self, number: int) -> int | None:
        """Snapshot the given one was taken from, via its parent UUID."""
        parent_uuid = self._show(number).get("Parent UUID", "-")
        if parent_uuid in ("", "-"):
            return None
        try:
            output = self._run(["btrfs", "subvolume", "show", "-u", parent_uuid,
                                str(self.sysroot)])
        except VolumeError as e:
            # parent already deleted
            logger.debug("Parent %s of snapshot %s not found: %s", parent_uuid, number, e)
            return None
        path, _ = parse_subvolume_show(output)
        return snapshot_number(path)

    def is_read_only(self, number: int) -> bool:
        return "readonly" in self._show(number).get("Flags", "").split()

    def list_snapshots(self) -> list[int]:
        output = self._run(["btrfs", "subvolume", "list", "-s", str(self.sysroot)])
        numbers = set()
        for line in output.splitlines():
            _, sep, path = line.partition(" path ")
            if sep and (number := snapshot_number(path)) is not None:
                numbers.add(number)
        return sorted(numbers)
