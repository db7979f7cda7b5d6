# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_options.py

"""Unit tests for kernel command line rewriting and entry matching."""

from snapboot.options import matches_snapshot, rewrite_options

SUBVOL = "@/.snapshots/5/snapshot"


def test_rewrite_replaces_root_and_subvol():
    rewritten = rewrite_options("root=/dev/sda1 rootflags=subvol=@/old quiet", "1234", SUBVOL)
    tokens = rewritten.split()

    assert tokens.count("root=UUID=1234") == 1
    assert tokens.count(f"rootflags=subvol={SUBVOL}") == 1
    assert "quiet" in tokens
    assert sum(t.startswith("rootflags=") for t in tokens) == 1
    assert rewritten == f"root=UUID=1234 rootflags=subvol={SUBVOL} quiet"


def test_rewrite_strips_boot_image_and_initrd():
    rewritten = rewrite_options("BOOT_IMAGE=/vmlinuz initrd=/initrd splash", "1234", SUBVOL)

    assert rewritten == f"root=UUID=1234 splash rootflags=subvol={SUBVOL}"


def test_rewrite_collapses_duplicates():
    rewritten = rewrite_options(
        "root=/dev/a rootflags=subvol=x quiet root=/dev/b rootflags=subvol=y", "1234", SUBVOL
    )

    assert rewritten == f"root=UUID=1234 rootflags=subvol={SUBVOL} quiet"


def test_rewrite_keeps_other_mount_flags():
    rewritten = rewrite_options("rootflags=compress=zstd,subvol=@/old", "1234", SUBVOL)

    assert rewritten == f"root=UUID=1234 rootflags=subvol={SUBVOL},compress=zstd"


def test_rewrite_of_empty_cmdline():
    assert rewrite_options("", "1234", SUBVOL) == f"root=UUID=1234 rootflags=subvol={SUBVOL}"


class TestMatchesSnapshot:

    def test_matches_rewritten_options(self):
        options = rewrite_options("quiet", "1234", SUBVOL)
        assert matches_snapshot(options, "1234", SUBVOL)

    def test_other_snapshot_does_not_match(self):
        options = rewrite_options("quiet", "1234", "@/.snapshots/50/snapshot")
        assert not matches_snapshot(options, "1234", SUBVOL)

    def test_prefix_of_snapshot_number_does_not_match(self):
        options = "root=UUID=1234 rootflags=subvol=@/.snapshots/5/snapshotx"
        assert not matches_snapshot(options, "1234", SUBVOL)

    def test_other_filesystem_does_not_match(self):
        options = rewrite_options("quiet", "9999", SUBVOL)
        assert not matches_snapshot(options, "1234", SUBVOL)

    def test_extra_mount_flags_still_match(self):
        options = f"root=UUID=1234 rootflags=subvol={SUBVOL},compress=zstd quiet"
        assert matches_snapshot(options, "1234", SUBVOL)
