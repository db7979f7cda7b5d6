# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/discovery.py

"""Kernel discovery inside a snapshot's module tree."""

import hashlib
from pathlib import Path

from .errors import NotFoundError
from .types import KernelArtifact

MODULES_DIR = "usr/lib/modules"
CHUNK_SIZE = 1 << 20


def file_digest(path: Path) -> str:
    """SHA-1 of a file's content, read in chunks."""
    digest = hashlib.sha1()
    with open(path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            digest.update(chunk)
    return digest.hexdigest()


def kernel_dir(snapshot_path: Path, version: str) -> Path:
    return Path(snapshot_path) / MODULES_DIR / version


def find_kernels(snapshot_path: Path | str, image: str = "vmlinuz") -> list[KernelArtifact]:
    """Every kernel binary in the snapshot, one per version, sorted by version."""
    snapshot_path = Path(snapshot_path)
    if not snapshot_path.exists():
        raise NotFoundError(f"Snapshot path does not exist: {snapshot_path}")

    modules = snapshot_path / MODULES_DIR
    if not modules.is_dir():
        return []

    kernels = []
    for version_dir in sorted(modules.iterdir()):
        binary = version_dir / image
        if version_dir.is_dir() and binary.is_file():
            kernels.append(KernelArtifact(
                version=version_dir.name,
                content_hash=file_digest(binary),
                source_path=binary,
            ))
    return kernels


def discover_kernels(snapshot_path: Path | str, image: str = "vmlinuz") -> dict[str, str]:
    """Map ``version -> content hash`` for every kernel in the snapshot."""
    return {k.version: k.content_hash for k in find_kernels(snapshot_path, image)}
