# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/entries.py

"""Boot entry rendering and the kernel install/remove operations."""

import logging
from pathlib import Path

from .context import BootContext
from .discovery import file_digest, find_kernels, kernel_dir
from .errors import InstallError, InstallFailed, NotFoundError, SnapbootError
from .initrd import resolve_initrd
from .installer import InstallTransaction, install_transaction
from .options import rewrite_options
from .reconcile import snapshot_entries
from .types import (
    InstallReport,
    InstallStage,
    Snapshot,
    entry_id,
    esp_path,
    installed_initrd_path,
    installed_kernel_path,
)

logger = logging.getLogger(__name__)

# Key order of the boot loader specification's type #1 entries.
ENTRY_KEYS = ("title", "version", "machine-id", "sort-key", "options", "linux", "initrd")


def render_entry(
    title: str,
    version: str,
    options: str,
    linux: str,
    initrd: str,
    machine_id: str | None = None,
    sort_key: str | None = None,
) -> str:
    values = {
        "title": title,
        "version": version,
        "machine-id": machine_id,
        "sort-key": sort_key,
        "options": options,
        "linux": linux,
        "initrd": initrd,
    }
    lines = [f"{key} {values[key]}" for key in ENTRY_KEYS if values[key]]
    return "\n".join(lines) + "\n"


def entry_file(ctx: BootContext, eid: str) -> Path:
    return ctx.settings.entries_dir / f"{eid}.conf"


def _install_stage(txn: InstallTransaction, stage: InstallStage,
                   source: Path, destination: Path) -> None:
    if destination.exists():
        logger.debug("%s already installed at %s", stage, destination)
        return
    try:
        txn.install(source, destination)
    except InstallError as e:
        raise InstallFailed(stage, str(e)) from e


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text()
    except (FileNotFoundError, UnicodeDecodeError):
        return None


def install_kernel(ctx: BootContext, snapshot: Snapshot, version: str) -> str:
    """Install kernel, initrd and entry for ``version`` of ``snapshot``.

    Either all three end up on the ESP or none of what this call wrote
    does. Returns the entry id.
    """
    image = kernel_dir(snapshot.path, version) / ctx.image
    if not image.is_file():
        raise NotFoundError(f"No kernel {version} in snapshot {snapshot.number}")
    linux = installed_kernel_path(ctx.token, version, file_digest(image))

    initrd = resolve_initrd(ctx, snapshot, version)
    if initrd.source is not None:
        # generated initrds only get a path once their hash is known
        initrd_path = installed_initrd_path(ctx.token, version, file_digest(initrd.source))
    else:
        initrd_path = initrd.installed_path

    eid = entry_id(ctx.token, version, snapshot.number)
    identity = ctx.identity
    text = render_entry(
        title=identity.pretty_name or f"Linux {version}",
        version=f"{snapshot.number}@{version}",
        machine_id=identity.machine_id if ctx.token == identity.machine_id else None,
        sort_key=identity.os_id,
        options=rewrite_options(identity.cmdline, ctx.root_uuid, snapshot.subvolume),
        linux=linux,
        initrd=initrd_path,
    )
    descriptor = entry_file(ctx, eid)

    with install_transaction(ctx.workdir) as txn:
        _install_stage(txn, "kernel", image, esp_path(ctx.esp, linux))
        if initrd.source is not None:
            _install_stage(txn, "initrd", initrd.source, esp_path(ctx.esp, initrd_path))
        if _read_text(descriptor) != text:
            try:
                txn.write_text(descriptor, text)
            except InstallError as e:
                raise InstallFailed("entry", str(e)) from e
        else:
            logger.debug("Entry %s is up to date", eid)

    logger.info("Installed entry %s", eid)
    return eid


def install_all_kernels(ctx: BootContext, snapshot: Snapshot) -> InstallReport:
    """Install every kernel of ``snapshot``, recording each outcome."""
    report = InstallReport()
    for kernel in find_kernels(snapshot.path, ctx.image):
        try:
            report.installed[kernel.version] = install_kernel(ctx, snapshot, kernel.version)
        except SnapbootError as e:
            logger.error("Kernel %s of snapshot %s: %s", kernel.version, snapshot.number, e)
            report.failed[kernel.version] = str(e)
    return report


def remove_kernel(ctx: BootContext, snapshot: Snapshot, version: str) -> str:
    eid = entry_id(ctx.token, version, snapshot.number)
    if not any(e.id == eid for e in ctx.boot_manager.list_entries()):
        raise NotFoundError(f"No entry {eid}")
    ctx.boot_manager.unlink(eid)
    return eid


def remove_all_kernels(ctx: BootContext, snapshot: Snapshot) -> list[str]:
    removed = []
    for entry in snapshot_entries(ctx, snapshot):
        ctx.boot_manager.unlink(entry.id)
        removed.append(entry.id)
    return removed
