# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/test_installer.py

"""Unit tests for the install transaction."""

import stat
from unittest.mock import patch

import pytest

from snapboot.errors import InstallError
from snapboot.installer import InstallTransaction, install_transaction


@pytest.fixture
def staging(tmp_path):
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "source"
    path.write_bytes(b"new content")
    return path


def test_install_copies_world_readable(tmp_path, staging, source):
    destination = tmp_path / "esp" / "token" / "6.1.0" / "linux-abc"

    with install_transaction(staging) as txn:
        txn.install(source, destination)

    assert destination.read_bytes() == b"new content"
    assert stat.S_IMODE(destination.stat().st_mode) == 0o644
    assert txn.touched == []


def test_rollback_removes_new_files(tmp_path, staging, source):
    destination = tmp_path / "esp" / "new"
    txn = InstallTransaction(staging)
    txn.install(source, destination)

    txn.rollback()

    assert not destination.exists()
    assert txn.touched == []


def test_rollback_restores_overwritten_files(tmp_path, staging, source):
    destination = tmp_path / "existing"
    destination.write_bytes(b"old content")
    txn = InstallTransaction(staging)
    txn.install(source, destination)
    assert destination.read_bytes() == b"new content"

    txn.rollback()

    assert destination.read_bytes() == b"old content"


def test_context_manager_rolls_back_on_error(tmp_path, staging, source):
    first = tmp_path / "first"
    second = tmp_path / "second"
    second.write_bytes(b"keep me")

    with pytest.raises(RuntimeError):
        with install_transaction(staging) as txn:
            txn.install(source, first)
            txn.install(source, second)
            raise RuntimeError("boom")

    assert not first.exists()
    assert second.read_bytes() == b"keep me"


def test_copy_failure_raises_install_error(tmp_path, staging):
    with pytest.raises(InstallError):
        with install_transaction(staging) as txn:
            txn.install(tmp_path / "does-not-exist", tmp_path / "dest")

    assert not (tmp_path / "dest").exists()
    assert [p.name for p in tmp_path.iterdir() if p.name.startswith(".dest")] == []


def test_rollback_failures_are_logged_not_raised(tmp_path, staging, source, caplog):
    destination = tmp_path / "dest"
    txn = InstallTransaction(staging)
    txn.install(source, destination)

    with patch("pathlib.Path.unlink", side_effect=PermissionError("denied")):
        txn.rollback()

    assert "Could not roll back" in caplog.text
    assert txn.touched == []


def test_write_text(tmp_path, staging):
    destination = tmp_path / "loader" / "entries" / "x.conf"

    with install_transaction(staging) as txn:
        txn.write_text(destination, "title X\n")

    assert destination.read_text() == "title X\n"
