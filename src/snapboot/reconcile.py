# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/reconcile.py

"""Kernels in a snapshot versus entries on the ESP."""

from .context import BootContext
from .discovery import discover_kernels
from .options import matches_snapshot
from .types import BootEntry, KernelStatus, Snapshot, installed_kernel_path


def snapshot_entries(ctx: BootContext, snapshot: Snapshot) -> list[BootEntry]:
    """Entries booting ``snapshot``, in boot manager order."""
    return [
        e for e in ctx.boot_manager.list_entries()
        if matches_snapshot(e.options, ctx.root_uuid, snapshot.subvolume)
    ]


def reconcile(discovered: dict[str, str], token: str,
              entries: list[BootEntry]) -> dict[str, KernelStatus]:
    """Status of every expected and every referenced kernel path.

    ``discovered`` maps kernel version to content hash.
    """
    status: dict[str, KernelStatus] = {
        installed_kernel_path(token, version, content_hash): "missing"
        for version, content_hash in discovered.items()
    }
    for entry in entries:
        if not entry.linux:
            continue
        if entry.linux not in status:
            status[entry.linux] = "stale"
        elif status[entry.linux] == "missing":
            status[entry.linux] = "installed"
    return status


def kernel_status(ctx: BootContext, snapshot: Snapshot) -> dict[str, KernelStatus]:
    discovered = discover_kernels(snapshot.path, ctx.image)
    return reconcile(discovered, ctx.token, snapshot_entries(ctx, snapshot))
