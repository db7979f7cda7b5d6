# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# tests/conftest.py
"""Pytest configuration for snapboot tests."""

import pytest

from tests.fixtures.esp_fixture import create_boot_environment


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--run-btrfs-tests",
        action="store_true",
        default=False,
        help="Run tests that query the host's btrfs root filesystem",
    )


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "btrfs_required: mark test as requiring a snapper-managed btrfs root",
    )


def pytest_collection_modifyitems(config, items):
    """Skip btrfs tests unless --run-btrfs-tests is passed."""
    if not config.getoption("--run-btrfs-tests"):
        skip_btrfs = pytest.mark.skip(
            reason="need --run-btrfs-tests option to run"
        )
        for item in items:
            if "btrfs_required" in item.keywords:
                item.add_marker(skip_btrfs)


@pytest.fixture
def env(tmp_path):
    """Fake sysroot and ESP with root snapshot 1."""
    return create_boot_environment(tmp_path)


@pytest.fixture
def boot(env):
    """An open BootContext over ``env``."""
    with env.context() as ctx:
        yield ctx
