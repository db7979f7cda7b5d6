# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# snapboot/src/snapboot/context.py

"""Everything one snapboot command needs, resolved once at startup."""

import logging
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Iterator

from .bootctl import Bootctl
from .config import Settings, SystemIdentity, kernel_image_name
from .dracut import Dracut
from .errors import NotFoundError
from .token import resolve_entry_token
from .types import Snapshot
from .volume import BtrfsVolume

logger = logging.getLogger(__name__)


@dataclass
class BootContext:
    settings: Settings
    identity: SystemIdentity
    token: str
    volume: BtrfsVolume
    boot_manager: Bootctl
    initrd_generator: Dracut
    workdir: Path
    _snapshots: dict = field(default_factory=dict, repr=False)

    @property
    def esp(self) -> Path:
        return self.settings.esp

    @property
    def image(self) -> str:
        return self.settings.image or kernel_image_name(self.settings.machine_arch())

    @cached_property
    def root_uuid(self) -> str:
        return self.volume.root_uuid()

    @cached_property
    def root_snapshot(self) -> int:
        return self.volume.root_snapshot()

    def snapshot(self, number: int | None = None) -> Snapshot:
        """The snapshot ``number``, or the one the system runs from."""
        if number is None:
            number = self.root_snapshot
        if number not in self._snapshots:
            path = self.volume.snapshot_path(number)
            if not path.is_dir():
                raise NotFoundError(f"Snapshot {number} does not exist at {path}")
            self._snapshots[number] = Snapshot(
                number=number,
                subvolume=self.volume.subvolume_for(number),
                path=path,
            )
        return self._snapshots[number]

    def is_root(self, snapshot: Snapshot) -> bool:
        return snapshot.number == self.root_snapshot


@contextmanager
def open_context(
    settings: Settings,
    *,
    identity: SystemIdentity | None = None,
    volume: BtrfsVolume | None = None,
    boot_manager: Bootctl | None = None,
    initrd_generator: Dracut | None = None,
) -> Iterator[BootContext]:
    """Resolve the entry token and provide a working area for one command.

    The working area is removed on every exit path.
    """
    if identity is None:
        identity = SystemIdentity.load(settings.sysroot)
    token = resolve_entry_token(
        settings.token_mode,
        settings.token_override,
        machine_id=identity.machine_id,
        os_release=identity.os_release,
        persisted=identity.persisted_token,
        known=identity.persisted_token,
    )
    logger.debug("Using entry token %s", token)

    with tempfile.TemporaryDirectory(prefix="snapboot-") as workdir:
        yield BootContext(
            settings=settings,
            identity=identity,
            token=token,
            volume=volume or BtrfsVolume(settings.sysroot),
            boot_manager=boot_manager or Bootctl(settings.esp),
            initrd_generator=initrd_generator or Dracut(),
            workdir=Path(workdir),
        )
