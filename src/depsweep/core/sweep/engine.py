"""The sweep engine: drive every candidate version through the pipeline.

Two phases:

1. ``plan()`` --- setup. Reads the project manifest, deduces the dependency's
   source root, picks the constraint and lists the candidate versions. Any
   failure here is a ``SetupError`` and nothing has touched the disk yet.
2. ``run()`` --- for each candidate: solve -> write -> verify -> cleanup,
   inside a ``VendorGuard`` when a verification command is configured.

Per-version units share no resolver state, so with ``workers > 1`` they run
on a thread pool. Solving is fully concurrent; everything that touches the
shared project vendor path is serialized by a lock. Materialize-only runs
write each version into its own temporary directory instead.
"""

from __future__ import annotations

import contextlib
import logging
import tempfile
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from depsweep.config import SweepConfig
from depsweep.core.catalog import CandidateSet, VersionCatalog
from depsweep.core.sweep.guard import VendorGuard
from depsweep.core.sweep.materializer import TreeMaterializer
from depsweep.core.sweep.models import (
    SolveOutcome,
    SweepReport,
    VersionReport,
    VersionStatus,
)
from depsweep.core.sweep.report import ReportAggregator
from depsweep.core.sweep.verifier import Verifier
from depsweep.core.versions import AnyConstraint, Constraint, Version
from depsweep.exceptions import SetupError, SolveError, WriteError
from depsweep.sources.base import (
    ManifestLoader,
    ProjectManifest,
    Resolver,
    SolveRequest,
    VersionSource,
)
from depsweep.workspace import derive_import_root

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepPlan:
    """The validated inputs of a sweep, fixed before any version runs."""

    candidates: CandidateSet
    import_root: str
    manifest: ProjectManifest

    @property
    def root(self) -> str:
        return self.candidates.root


class SweepEngine:
    """Orchestrates a compatibility sweep.

    Args:
        config: The run configuration.
        source: Version source for root deduction and version listing.
        resolver: Resolver for solving and exporting.
        manifest_loader: Optional reader of the project's manifest and lock.
    """

    def __init__(
        self,
        config: SweepConfig,
        source: VersionSource,
        resolver: Resolver,
        manifest_loader: ManifestLoader | None = None,
    ) -> None:
        self.config = config
        self._catalog = VersionCatalog(source)
        self._resolver = resolver
        self._manifest_loader = manifest_loader
        self._materializer = TreeMaterializer(resolver)
        self._vendor_lock = threading.Lock()
        self._verifier: Verifier | None = None
        if config.run_command is not None:
            self._verifier = Verifier(
                config.run_command,
                config.project_dir,
                config.vendor_dir,
                timeout=config.timeout,
            )

    # -- setup --------------------------------------------------------------

    def plan(self) -> SweepPlan:
        """Resolve the candidate versions.

        Raises:
            SetupError: On manifest, root deduction or catalog failures.
        """
        manifest = ProjectManifest()
        if self._manifest_loader is not None:
            manifest = self._manifest_loader.load(self.config.project_dir) or manifest

        import_root = derive_import_root(self.config.project_dir, self.config.workspace)
        root = self._catalog.deduce_root(self.config.dependency)
        constraint = self._choose_constraint(root, manifest)
        candidates = self._catalog.select(root, constraint)
        return SweepPlan(candidates=candidates, import_root=import_root, manifest=manifest)

    def _choose_constraint(self, root: str, manifest: ProjectManifest) -> Constraint:
        if self.config.explicit_constraint:
            return self.config.constraint
        declared = manifest.requirements.get(root)
        if self.config.use_manifest and declared is not None:
            logger.info("Narrowing %s to manifest constraint %s", root, declared)
            return declared
        return AnyConstraint()

    # -- sweep --------------------------------------------------------------

    def run(self, plan: SweepPlan | None = None) -> SweepReport:
        """Sweep every candidate and return the ordered report.

        The vendor guard restores the original vendor tree on every exit
        path, including KeyboardInterrupt.

        Raises:
            SetupError: If the vendor tree cannot be backed up or restored,
                or a transient tree cannot be cleaned up.
        """
        plan = plan or self.plan()
        aggregator = ReportAggregator(plan.root, len(plan.candidates), self.config.verifies)

        guard: contextlib.AbstractContextManager = contextlib.nullcontext()
        if self.config.verifies:
            guard = VendorGuard(self.config.vendor_dir, self.config.backup_dir)

        with guard:
            self._dispatch(plan, aggregator)
        return aggregator.build()

    def _dispatch(self, plan: SweepPlan, aggregator: ReportAggregator) -> None:
        versions = list(plan.candidates)
        workers = min(self.config.workers, len(versions))
        if workers <= 1:
            for index, version in enumerate(versions):
                aggregator.record(index, self.process(plan, version))
            return

        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="depsweep")
        try:
            futures = {
                pool.submit(self.process, plan, version): index
                for index, version in enumerate(versions)
            }
            for future in as_completed(futures):
                aggregator.record(futures[future], future.result())
        except BaseException:
            # Let running units finish their cleanup before the guard restores.
            pool.shutdown(wait=True, cancel_futures=True)
            raise
        pool.shutdown(wait=True)

    def process(self, plan: SweepPlan, version: Version) -> VersionReport:
        """Run one candidate through solve -> write -> verify -> cleanup."""
        outcome = self.solve(plan, version)
        if not outcome.ok:
            return VersionReport(
                plan.root, version, VersionStatus.SOLVE_FAILED,
                f"failed solving: {outcome.error}",
            )

        if self._verifier is not None:
            with self._vendor_lock:
                return self._materialize(plan, outcome, self.config.vendor_dir)

        with tempfile.TemporaryDirectory(prefix="depsweep-") as tmp:
            return self._materialize(plan, outcome, Path(tmp) / "vendor")

    def solve(self, plan: SweepPlan, version: Version) -> SolveOutcome:
        """Resolve the project with the target pinned to *version*."""
        request = SolveRequest(
            project_dir=self.config.project_dir,
            import_root=plan.import_root,
            requirements=MappingProxyType({
                root: c for root, c in plan.manifest.requirements.items()
                if root != plan.root
            }),
            lock=MappingProxyType({
                root: name for root, name in plan.manifest.lock.items()
                if root != plan.root
            }),
            target=plan.root,
            pin=version,
        )
        try:
            solution = self._resolver.solve(request)
        except SolveError as exc:
            logger.debug("Solving %s@%s failed: %s", plan.root, version, exc)
            return SolveOutcome(version, error=exc)
        except Exception as exc:
            logger.warning("Resolver error for %s@%s", plan.root, version, exc_info=True)
            return SolveOutcome(version, error=exc)
        return SolveOutcome(version, solution=solution)

    def _materialize(
        self, plan: SweepPlan, outcome: SolveOutcome, vendor_dir: Path
    ) -> VersionReport:
        version = outcome.version
        try:
            try:
                self._materializer.write(outcome, vendor_dir)
            except WriteError as exc:
                return VersionReport(
                    plan.root, version, VersionStatus.WRITE_FAILED,
                    f"could not write tree, skipping check: {exc}",
                )
            if self._verifier is None:
                return VersionReport(plan.root, version, VersionStatus.SUCCEEDED)

            result = self._verifier.verify(version)
            if result.ok:
                return VersionReport(plan.root, version, VersionStatus.SUCCEEDED)
            return VersionReport(
                plan.root, version, VersionStatus.VERIFY_FAILED,
                f"failed with {result.error}, output:\n{result.output}".rstrip(),
            )
        finally:
            self._cleanup(vendor_dir)

    def _cleanup(self, vendor_dir: Path) -> None:
        try:
            self._materializer.remove(vendor_dir)
        except OSError as exc:
            raise SetupError(
                f"Cannot remove transient vendor tree {vendor_dir}: {exc}"
            ) from exc
