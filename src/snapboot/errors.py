# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/errors.py

"""Error hierarchy for snapboot.

Every error is fatal to the command that raised it; the CLI turns any
``SnapbootError`` into a single message and exit status 1.
"""


class SnapbootError(Exception):
    """Base class for all snapboot errors."""


class ConfigurationError(SnapbootError):
    """The environment could not be resolved (UUID, token, arch...)."""


class NotFoundError(SnapbootError):
    """An expected source artifact is absent."""


class InitrdUnavailableError(SnapbootError):
    """No legal initrd source exists for a kernel."""


class InstallError(SnapbootError):
    """A file-system write on the ESP failed."""


class InstallFailed(InstallError):
    """One stage of an install_kernel call failed and was rolled back."""

    def __init__(self, stage: str, reason: str):
        super().__init__(f"installing {stage} failed: {reason}")
        self.stage = stage
        self.reason = reason


class NoKernelsError(SnapbootError):
    """A snapshot has nothing to boot."""


class BootManagerError(SnapbootError):
    """The boot manager rejected a query or command."""


class VolumeError(SnapbootError):
    """A btrfs metadata query failed."""
