# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/config.py

"""Runtime settings and the identity of the installed system."""

import logging
import platform
import shlex
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ESP = Path("/boot/efi")
ENTRY_TOKEN_FILE = "etc/kernel/entry-token"
KERNEL_CMDLINE_FILES = ("etc/kernel/cmdline", "proc/cmdline")
OS_RELEASE_FILES = ("etc/os-release", "usr/lib/os-release")
MACHINE_ID_FILE = "etc/machine-id"

# machine arch -> (kernel image name, EFI arch)
ARCHES = {
    "x86_64": ("vmlinuz", "x64"),
    "aarch64": ("Image", "aa64"),
}


@dataclass
class Settings:
    """Options of one snapboot invocation."""
    sysroot: Path = Path("/")
    esp: Path = DEFAULT_ESP
    arch: str | None = None
    image: str | None = None
    token_mode: str | None = None
    token_override: str | None = None
    reuse_initrd: bool = True
    require_readonly_parent: bool = False

    def machine_arch(self) -> str:
        return self.arch or platform.machine()

    @property
    def entries_dir(self) -> Path:
        return self.esp / "loader" / "entries"

    @property
    def entry_token_file(self) -> Path:
        return self.sysroot / ENTRY_TOKEN_FILE


def kernel_image_name(arch: str) -> str:
    try:
        return ARCHES[arch][0]
    except KeyError:
        raise ConfigurationError(f"Unsupported architecture: {arch}") from None


def efi_arch(arch: str) -> str:
    try:
        return ARCHES[arch][1]
    except KeyError:
        raise ConfigurationError(f"Unsupported architecture: {arch}") from None


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release(5) KEY=value lines, honouring shell quoting."""
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw = line.partition("=")
        try:
            parts = shlex.split(raw)
        except ValueError:
            logger.warning("Ignoring malformed os-release line: %s", line)
            continue
        values[key.strip()] = parts[0] if parts else ""
    return values


def _read_first(sysroot: Path, candidates) -> str | None:
    for name in candidates:
        path = sysroot / name
        if path.is_file():
            return path.read_text()
    return None


@dataclass(frozen=True)
class SystemIdentity:
    """What the running system says about itself."""
    machine_id: str | None = None
    os_release: dict[str, str] = field(default_factory=dict)
    persisted_token: str | None = None
    cmdline: str = ""

    @property
    def pretty_name(self) -> str | None:
        return self.os_release.get("PRETTY_NAME") or None

    @property
    def os_id(self) -> str | None:
        return self.os_release.get("ID") or None

    @classmethod
    def load(cls, sysroot: Path) -> "SystemIdentity":
        os_release = parse_os_release(_read_first(sysroot, OS_RELEASE_FILES) or "")

        machine_id = _read_first(sysroot, (MACHINE_ID_FILE,))
        machine_id = machine_id.strip() if machine_id else None

        token = _read_first(sysroot, (ENTRY_TOKEN_FILE,))
        token = token.strip() if token else None

        cmdline = _read_first(sysroot, KERNEL_CMDLINE_FILES) or ""

        logger.debug("Loaded identity machine_id=%s token=%s", machine_id, token)
        return cls(
            machine_id=machine_id or None,
            os_release=os_release,
            persisted_token=token or None,
            cmdline=" ".join(cmdline.split()),
        )
