# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/bootloader.py

"""Copying the systemd-boot binary onto the ESP."""

import logging
from pathlib import Path

from .config import efi_arch
from .context import BootContext
from .errors import NotFoundError
from .installer import install_transaction

logger = logging.getLogger(__name__)

BOOTLOADER_DIR = "usr/lib/systemd/boot/efi"


def bootloader_binary(ctx: BootContext) -> Path:
    arch = efi_arch(ctx.settings.machine_arch())
    return ctx.settings.sysroot / BOOTLOADER_DIR / f"systemd-boot{arch}.efi"


def bootloader_destinations(ctx: BootContext) -> list[Path]:
    arch = efi_arch(ctx.settings.machine_arch())
    return [
        ctx.esp / "EFI" / "systemd" / f"systemd-boot{arch}.efi",
        ctx.esp / "EFI" / "BOOT" / f"BOOT{arch.upper()}.EFI",
    ]


def install_bootloader(ctx: BootContext) -> list[Path]:
    """Copy systemd-boot to its own and to the fallback location."""
    source = bootloader_binary(ctx)
    if not source.is_file():
        raise NotFoundError(f"Boot loader binary not found: {source}")

    destinations = bootloader_destinations(ctx)
    with install_transaction(ctx.workdir) as txn:
        for destination in destinations:
            txn.install(source, destination)
    ctx.settings.entries_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Installed boot loader from %s", source)
    return destinations


def is_installed(ctx: BootContext) -> bool:
    return bootloader_destinations(ctx)[0].is_file()
