# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# Copyright (C) 2025 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# snapboot/src/snapboot/__init__.py

"""Kernel and boot entry management for btrfs root snapshots."""

from .context import BootContext, open_context
from .discovery import discover_kernels, find_kernels
from .entries import install_all_kernels, install_kernel, remove_all_kernels, remove_kernel
from .errors import (
    ConfigurationError,
    InitrdUnavailableError,
    InstallError,
    InstallFailed,
    NoKernelsError,
    NotFoundError,
    SnapbootError,
)
from .reconcile import kernel_status
from .selector import set_default_snapshot
from .token import resolve_entry_token
from .types import BootEntry, KernelArtifact, Snapshot

__version__ = "0.1.0"

__all__ = [
    "BootContext",
    "open_context",
    "discover_kernels",
    "find_kernels",
    "install_kernel",
    "install_all_kernels",
    "remove_kernel",
    "remove_all_kernels",
    "kernel_status",
    "set_default_snapshot",
    "resolve_entry_token",
    "BootEntry",
    "KernelArtifact",
    "Snapshot",
    "SnapbootError",
    "ConfigurationError",
    "NotFoundError",
    "InitrdUnavailableError",
    "InstallError",
    "InstallFailed",
    "NoKernelsError",
]
