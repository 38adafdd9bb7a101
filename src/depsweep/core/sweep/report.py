"""Collects per-version statuses into an ordered ``SweepReport``."""

from __future__ import annotations

import threading

from depsweep.core.sweep.models import SweepReport, VersionReport


class ReportAggregator:
    """Slot-per-candidate collector.

    Results are stored by candidate index, not arrival order, so the final
    report follows catalog order whatever order the workers finish in.

    Args:
        root: Source root being swept.
        size: Number of candidate versions.
        verified: Whether a verification command was configured.
    """

    def __init__(self, root: str, size: int, verified: bool = False) -> None:
        self._root = root
        self._verified = verified
        self._slots: list[VersionReport | None] = [None] * size
        self._lock = threading.Lock()

    def record(self, index: int, report: VersionReport) -> None:
        """Store the terminal status of the candidate at *index*.

        Raises:
            ValueError: If that candidate already has a status.
        """
        with self._lock:
            if self._slots[index] is not None:
                raise ValueError(f"Candidate {index} already recorded")
            self._slots[index] = report

    @property
    def complete(self) -> bool:
        return all(slot is not None for slot in self._slots)

    def build(self) -> SweepReport:
        """Return the ordered report.

        Raises:
            RuntimeError: If any candidate has no status yet.
        """
        missing = [i for i, slot in enumerate(self._slots) if slot is None]
        if missing:
            raise RuntimeError(f"No status recorded for candidates {missing}")
        return SweepReport(
            root=self._root,
            entries=tuple(self._slots),  # type: ignore[arg-type]
            verified=self._verified,
        )
