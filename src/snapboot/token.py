# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/token.py

"""Entry token resolution.

The entry token is the namespace every installed kernel path and boot
entry id lives under. Resolution follows the precedence of the boot
loader specification's ``entry-token`` setting.
"""

import logging
from pathlib import Path

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

TOKEN_MODES = ("auto", "machine-id", "os-id", "os-image")
LITERAL_PREFIX = "literal:"


def parse_token_option(value: str | None) -> tuple[str | None, str | None]:
    """Split an ``--entry-token`` value into ``(mode, override)``."""
    if not value:
        return None, None
    if value in TOKEN_MODES:
        return value, None
    if value.startswith(LITERAL_PREFIX):
        value = value[len(LITERAL_PREFIX):]
        if not value:
            raise ConfigurationError("Empty literal entry token")
    return None, value


def _require_machine_id(machine_id: str | None) -> str:
    if not machine_id:
        raise ConfigurationError("Could not determine machine-id")
    return machine_id


def resolve_entry_token(
    mode: str | None = None,
    override: str | None = None,
    *,
    machine_id: str | None,
    os_release: dict[str, str],
    persisted: str | None = None,
    known: str | None = None,
) -> str:
    """Pick the entry token. Pure: nothing is written."""
    if override:
        return override

    if mode == "auto":
        if persisted:
            return persisted
        return _require_machine_id(machine_id)

    if mode == "machine-id":
        return _require_machine_id(machine_id)

    if mode in ("os-id", "os-image"):
        key = "ID" if mode == "os-id" else "IMAGE_ID"
        value = os_release.get(key)
        if not value:
            raise ConfigurationError(f"Missing {key} in os-release for entry token {mode}")
        return value

    if mode is not None:
        raise ConfigurationError(f"Unknown entry token mode: {mode}")

    if known:
        return known
    return _require_machine_id(machine_id)


def write_entry_token(path: Path, token: str) -> bool:
    """Persist ``token``; returns False when the file already holds it."""
    if path.is_file() and path.read_text().strip() == token:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(token + "\n")
    logger.info("Wrote entry token %s to %s", token, path)
    return True
