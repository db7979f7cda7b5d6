# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/dracut.py

"""Initrd generation with dracut."""

import logging
import subprocess
from pathlib import Path

from .errors import InitrdUnavailableError

logger = logging.getLogger(__name__)


class Dracut:
    """Builds an initrd for a kernel of the running system."""

    def __init__(self, extra_args: list[str] | None = None):
        self.extra_args = list(extra_args or [])

    def generate(self, destination: Path, version: str) -> None:
        cmd = ["dracut", "--quiet", "--reproducible", "--force",
               *self.extra_args, str(destination), version]
        logger.info("Generating initrd for %s", version)
        try:
            subprocess.run(cmd, capture_output=True, check=True, text=True)
        except FileNotFoundError as e:
            raise InitrdUnavailableError("dracut not found") from e
        except subprocess.CalledProcessError as e:
            raise InitrdUnavailableError(
                f"dracut failed for {version}: {e.stderr.strip()}"
            ) from e
        if not Path(destination).is_file():
            raise InitrdUnavailableError(f"dracut produced no initrd for {version}")
