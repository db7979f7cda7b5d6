# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/initrd.py

"""Choosing the initrd for a kernel of a snapshot.

Generating an initrd is expensive and only possible for the snapshot the
system runs from, so an existing one is preferred: first the snapshot's
own, then the one already installed for the parent snapshot's entry.
"""

import logging

from .context import BootContext
from .discovery import kernel_dir
from .errors import InitrdUnavailableError
from .types import BootEntry, InitrdSource, Snapshot, entry_id

logger = logging.getLogger(__name__)

INITRD_NAME = "initrd"


def parent_entry(ctx: BootContext, snapshot: Snapshot, version: str) -> BootEntry | None:
    """The parent snapshot's installed entry for ``version``, if any."""
    parent = ctx.volume.parent_snapshot(snapshot.number)
    if parent is None:
        return None
    if ctx.settings.require_readonly_parent and not ctx.volume.is_read_only(parent):
        logger.info("Parent snapshot %s is writable, not reusing its initrd", parent)
        return None

    wanted = entry_id(ctx.token, version, parent)
    for entry in ctx.boot_manager.list_entries():
        if entry.id == wanted:
            return entry
    return None


def resolve_initrd(ctx: BootContext, snapshot: Snapshot, version: str) -> InitrdSource:
    own = kernel_dir(snapshot.path, version) / INITRD_NAME
    if own.is_file():
        logger.debug("Using initrd shipped in snapshot %s", snapshot.number)
        return InitrdSource(origin="snapshot", source=own)

    if ctx.settings.reuse_initrd:
        entry = parent_entry(ctx, snapshot, version)
        if entry is not None:
            if not entry.initrd:
                raise InitrdUnavailableError(
                    f"Parent entry {entry.id} has no initrd to reuse"
                )
            logger.info("Reusing initrd %s from entry %s", entry.initrd, entry.id)
            return InitrdSource(origin="parent", installed_path=entry.initrd)

    if ctx.is_root(snapshot):
        destination = ctx.workdir / f"initrd-{version}"
        ctx.initrd_generator.generate(destination, version)
        return InitrdSource(origin="generated", source=destination)

    raise InitrdUnavailableError(
        f"No initrd for {version} in snapshot {snapshot.number} and it is not "
        f"the root snapshot"
    )
