# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_reconcile.py

"""Tests for kernel status reconciliation."""

import hashlib

from snapboot.entries import install_kernel
from snapboot.reconcile import kernel_status, reconcile, snapshot_entries
from snapboot.types import BootEntry

from tests.fixtures.esp_fixture import MACHINE_ID


def test_installed_missing_and_stale():
    discovered = {"A": "ha", "B": "hb"}
    entries = [
        BootEntry(id="t-A-1", linux="/t/A/linux-ha"),
        BootEntry(id="t-C-1", linux="/t/C/linux-hc"),
    ]

    assert reconcile(discovered, "t", entries) == {
        "/t/A/linux-ha": "installed",
        "/t/B/linux-hb": "missing",
        "/t/C/linux-hc": "stale",
    }


def test_entries_without_linux_are_ignored():
    assert reconcile({"A": "ha"}, "t", [BootEntry(id="x")]) == {"/t/A/linux-ha": "missing"}


def test_upgraded_kernel_leaves_old_entry_stale(env, boot):
    env.add_snapshot(1, kernels={"6.1.0": b"old"})
    install_kernel(boot, boot.snapshot(1), "6.1.0")
    (env.volume.snapshot_path(1) / "usr/lib/modules/6.1.0/vmlinuz").write_bytes(b"new")

    status = kernel_status(boot, boot.snapshot(1))

    old = hashlib.sha1(b"old").hexdigest()
    new = hashlib.sha1(b"new").hexdigest()
    assert status == {
        f"/{MACHINE_ID}/6.1.0/linux-{new}": "missing",
        f"/{MACHINE_ID}/6.1.0/linux-{old}": "stale",
    }


def test_status_only_considers_entries_of_the_snapshot(env, boot):
    env.add_snapshot(1, kernels={"6.1.0": b"k"})
    env.add_snapshot(2, kernels={"6.1.0": b"k", "6.2.0": b"k2"}, initrds={"6.2.0": b"i"})
    install_kernel(boot, boot.snapshot(1), "6.1.0")
    install_kernel(boot, boot.snapshot(2), "6.2.0")

    status = kernel_status(boot, boot.snapshot(1))

    assert list(status.values()) == ["installed"]
    assert [e.id for e in snapshot_entries(boot, boot.snapshot(2))] == [
        f"{MACHINE_ID}-6.2.0-2"
    ]
