"""Per-version outcomes and the sweep report."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from depsweep.core.versions import Version
from depsweep.sources.base import Solution


@dataclass(frozen=True)
class SolveOutcome:
    """Result of resolving one candidate version.

    Exactly one of ``solution`` and ``error`` is set.
    """

    version: Version
    solution: Solution | None = None
    error: BaseException | None = None

    def __post_init__(self) -> None:
        if (self.solution is None) == (self.error is None):
            raise ValueError("SolveOutcome needs exactly one of solution or error")

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class VerificationResult:
    """Result of running the verification command against one version.

    Attributes:
        version: The version whose tree was verified.
        exit_status: Process exit status, or None if it never exited normally
            (launch failure or timeout).
        output: Combined stdout and stderr.
        error: Launch or timeout error, if any.
    """

    version: Version
    exit_status: int | None
    output: str = ""
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.exit_status == 0


class VersionStatus(Enum):
    """Terminal status of one version in a sweep."""

    SOLVE_FAILED = "solve failed"
    WRITE_FAILED = "write failed"
    VERIFY_FAILED = "verify failed"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class VersionReport:
    """Terminal status of one version plus its diagnostic text."""

    root: str
    version: Version
    status: VersionStatus
    detail: str = ""

    @property
    def label(self) -> str:
        return f"{self.root}@{self.version}"

    @property
    def succeeded(self) -> bool:
        return self.status is VersionStatus.SUCCEEDED


@dataclass(frozen=True)
class SweepReport:
    """Ordered per-version statuses of one sweep.

    Attributes:
        root: Source root that was swept.
        entries: One report per candidate version, in catalog order.
        verified: Whether a verification command was configured.
    """

    root: str
    entries: tuple[VersionReport, ...]
    verified: bool = False

    @property
    def failed(self) -> bool:
        """True if any version did not succeed."""
        return any(not e.succeeded for e in self.entries)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0

    def counts(self) -> dict[VersionStatus, int]:
        totals = {status: 0 for status in VersionStatus}
        for entry in self.entries:
            totals[entry.status] += 1
        return totals
