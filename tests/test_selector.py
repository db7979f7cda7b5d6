# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_selector.py

"""Tests for default snapshot selection."""

from unittest.mock import patch

import pytest

from snapboot import selector
from snapboot.entries import install_all_kernels
from snapboot.errors import NoKernelsError
from snapboot.selector import set_default_snapshot

from tests.fixtures.esp_fixture import MACHINE_ID


def test_installs_on_demand_then_sets_default(env, boot):
    env.add_snapshot(1, kernels={"5.14.0": b"kernel"})

    with patch.object(selector, "install_all_kernels", wraps=install_all_kernels) as install:
        eid = set_default_snapshot(boot, boot.snapshot(1))

    assert install.call_count == 1
    assert eid == f"{MACHINE_ID}-5.14.0-1"
    assert env.boot_manager.calls == [("set-default", eid)]
    assert [e.id for e in env.boot_manager.list_entries() if e.is_default] == [eid]


def test_no_kernels(env, boot):
    env.add_snapshot(1)

    with pytest.raises(NoKernelsError):
        set_default_snapshot(boot, boot.snapshot(1))
    assert env.boot_manager.calls == []


def test_existing_entries_are_not_reinstalled(env, boot):
    env.add_snapshot(1, kernels={"6.1.0": b"a", "6.2.0": b"b"})
    set_default_snapshot(boot, boot.snapshot(1))

    with patch.object(selector, "install_all_kernels") as install:
        eid = set_default_snapshot(boot, boot.snapshot(1))

    install.assert_not_called()
    assert eid == f"{MACHINE_ID}-6.1.0-1"


def test_failed_installs_are_surfaced(env, boot):
    # not the root snapshot and nothing to take the initrd from
    env.add_snapshot(3, kernels={"6.1.0": b"kernel"})

    with pytest.raises(NoKernelsError, match="6.1.0"):
        set_default_snapshot(boot, boot.snapshot(3))
    assert env.boot_manager.calls == []


def test_oneshot(env, boot):
    env.add_snapshot(1, kernels={"6.1.0": b"kernel"})

    eid = set_default_snapshot(boot, boot.snapshot(1), oneshot=True)

    assert env.boot_manager.calls == [("set-oneshot", eid)]
