# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/selector.py

"""Making a snapshot the default boot target."""

import logging

from .context import BootContext
from .entries import install_all_kernels
from .errors import NoKernelsError
from .reconcile import snapshot_entries
from .types import Snapshot

logger = logging.getLogger(__name__)


def set_default_snapshot(ctx: BootContext, snapshot: Snapshot, oneshot: bool = False) -> str:
    """Point the boot manager at the first entry of ``snapshot``.

    Entries are installed on demand when the snapshot has none yet.
    Returns the id of the selected entry.
    """
    entries = snapshot_entries(ctx, snapshot)
    if not entries:
        logger.info("Snapshot %s has no entries, installing its kernels", snapshot.number)
        report = install_all_kernels(ctx, snapshot)
        entries = snapshot_entries(ctx, snapshot)
        if not entries:
            detail = "; ".join(f"{v}: {err}" for v, err in report.failed.items())
            raise NoKernelsError(
                f"Snapshot {snapshot.number} has no bootable kernels"
                + (f" ({detail})" if detail else "")
            )

    eid = entries[0].id
    if oneshot:
        ctx.boot_manager.set_oneshot(eid)
    else:
        ctx.boot_manager.set_default(eid)
    return eid
