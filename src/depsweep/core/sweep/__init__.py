"""Per-version sweep pipeline.

The package is split into focused submodules:

- ``models``: ``SolveOutcome``, ``VerificationResult``, ``VersionStatus``,
  ``VersionReport`` and ``SweepReport``.
- ``guard``: ``VendorGuard``, the backup/restore context manager.
- ``materializer``: ``TreeMaterializer``, writes and removes vendor trees.
- ``verifier``: ``Verifier`` and ``split_command``.
- ``report``: ``ReportAggregator``, the catalog-ordered collector.
- ``engine``: ``SweepEngine``, which drives all of the above.
"""

from depsweep.core.sweep.engine import SweepEngine, SweepPlan
from depsweep.core.sweep.guard import GuardState, VendorGuard
from depsweep.core.sweep.materializer import TreeMaterializer
from depsweep.core.sweep.models import (
    SolveOutcome,
    SweepReport,
    VerificationResult,
    VersionReport,
    VersionStatus,
)
from depsweep.core.sweep.report import ReportAggregator
from depsweep.core.sweep.verifier import Verifier, split_command

__all__ = [
    "GuardState",
    "ReportAggregator",
    "SolveOutcome",
    "SweepEngine",
    "SweepPlan",
    "SweepReport",
    "TreeMaterializer",
    "VendorGuard",
    "VerificationResult",
    "Verifier",
    "VersionReport",
    "VersionStatus",
    "split_command",
]
