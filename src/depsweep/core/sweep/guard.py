"""Vendor guard: keep the project's real vendor tree safe during a sweep.

Used as a context manager around every per-version materialization::

    with VendorGuard(vendor_dir, backup_dir):
        ...  # write, verify and remove transient vendor trees

On entry an existing vendor tree is renamed to the backup location. On exit,
on every path including exceptions and KeyboardInterrupt, any transient tree
left behind is removed and the backup is renamed back. Only one of the
original tree, the backup, and a transient tree occupies the vendor path at
any moment.
"""

from __future__ import annotations

import logging
import os
import shutil
from enum import Enum
from pathlib import Path
from types import TracebackType

from depsweep.exceptions import VendorBackupFailed, VendorRestoreFailed

logger = logging.getLogger(__name__)


class GuardState(Enum):
    IDLE = "idle"
    BACKED_UP = "backed up"
    NOTHING_TO_BACK_UP = "nothing to back up"
    RESTORED = "restored"


class VendorGuard:
    """Backs up the vendor directory on entry and restores it on exit.

    Args:
        vendor_dir: The project's vendor directory.
        backup_dir: Where the original tree is parked meanwhile.
    """

    def __init__(self, vendor_dir: Path, backup_dir: Path) -> None:
        self.vendor_dir = vendor_dir
        self.backup_dir = backup_dir
        self.state = GuardState.IDLE

    def backup(self) -> None:
        """Move an existing vendor tree aside.

        Raises:
            VendorBackupFailed: If a stale backup exists or the rename fails.
                The vendor tree is untouched in both cases.
        """
        if self.state is not GuardState.IDLE:
            raise RuntimeError(f"VendorGuard cannot back up from state {self.state.value}")
        if not os.path.lexists(self.vendor_dir):
            logger.debug("No vendor tree at %s; nothing to back up", self.vendor_dir)
            self.state = GuardState.NOTHING_TO_BACK_UP
            return
        if os.path.lexists(self.backup_dir):
            raise VendorBackupFailed(
                f"Failed to back up vendor folder: {self.backup_dir} already exists "
                "(left over from an interrupted run?)"
            )
        try:
            os.rename(self.vendor_dir, self.backup_dir)
        except OSError as exc:
            raise VendorBackupFailed(f"Failed to back up vendor folder: {exc}") from exc
        logger.debug("Backed up %s to %s", self.vendor_dir, self.backup_dir)
        self.state = GuardState.BACKED_UP

    def restore(self) -> None:
        """Put the original vendor state back. Runs at most once.

        Raises:
            VendorRestoreFailed: If the backup cannot be moved back.
        """
        if self.state in (GuardState.IDLE, GuardState.RESTORED):
            return
        backed_up = self.state is GuardState.BACKED_UP
        # Whatever happens below, a second restore must not run.
        self.state = GuardState.RESTORED

        if os.path.lexists(self.vendor_dir):
            logger.warning("Removing leftover vendor tree at %s", self.vendor_dir)
            try:
                _remove(self.vendor_dir)
            except OSError as exc:
                kept = f"; the original is preserved at {self.backup_dir}" if backed_up else ""
                raise VendorRestoreFailed(
                    f"Cannot remove leftover vendor tree {self.vendor_dir}{kept}: {exc}"
                ) from exc

        if not backed_up:
            return
        try:
            os.rename(self.backup_dir, self.vendor_dir)
        except OSError as exc:
            raise VendorRestoreFailed(
                f"Failed to restore vendor folder; it is preserved at {self.backup_dir}: {exc}"
            ) from exc
        logger.debug("Restored %s", self.vendor_dir)

    def __enter__(self) -> VendorGuard:
        self.backup()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.restore()


def _remove(path: Path) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
    else:
        os.unlink(path)
