# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/types.py

"""Type definitions for snapshot boot entries and kernel artifacts."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal


KernelStatus = Literal["installed", "stale", "missing"]
InitrdOrigin = Literal["snapshot", "parent", "generated"]
InstallStage = Literal["kernel", "initrd", "entry"]


@dataclass(frozen=True)
class Snapshot:
    """A snapper snapshot of the root filesystem."""
    number: int
    subvolume: str
    path: Path

    @property
    def name(self) -> str:
        return str(self.number)


@dataclass(frozen=True)
class KernelArtifact:
    """A kernel binary found in a snapshot's module tree."""
    version: str
    content_hash: str
    source_path: Path


@dataclass(frozen=True)
class BootEntry:
    """A boot entry as reported by the boot manager."""
    id: str
    options: str = ""
    linux: str | None = None
    initrd: str | None = None
    title: str = ""
    kernel_version: str | None = None
    snapshot: str | None = None
    is_default: bool = False
    is_reported: bool = False
    sort_key: str | None = None
    machine_id: str | None = None
    path: str | None = None
    type: str | None = None


@dataclass(frozen=True)
class InitrdSource:
    """Where the initrd of one entry comes from.

    ``source`` is a local file still to be installed; ``installed_path`` is
    an ESP path that is referenced as-is.
    """
    origin: InitrdOrigin
    source: Path | None = None
    installed_path: str | None = None


@dataclass
class InstallReport:
    """Outcome of installing every kernel of a snapshot."""
    installed: dict[str, str] = field(default_factory=dict)
    failed: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def installed_kernel_path(token: str, version: str, content_hash: str) -> str:
    """ESP-relative path of a kernel binary with the given hash."""
    return f"/{token}/{version}/linux-{content_hash}"


def installed_initrd_path(token: str, version: str, content_hash: str) -> str:
    """ESP-relative path of an initrd with the given hash."""
    return f"/{token}/{version}/initrd-{content_hash}"


def entry_id(token: str, version: str, snapshot: int | str) -> str:
    return f"{token}-{version}-{snapshot}"


def esp_path(esp: Path, relative: str) -> Path:
    """Map an ESP-relative path like ``/token/v/linux-x`` onto the ESP."""
    return esp / relative.lstrip("/")
