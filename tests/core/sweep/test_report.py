"""Tests for ``ReportAggregator`` and the sweep report models."""

from __future__ import annotations

import pytest

from depsweep.core.sweep import (
    ReportAggregator,
    SolveOutcome,
    SweepReport,
    VersionReport,
    VersionStatus,
)
from depsweep.core.versions import Version
from depsweep.sources.base import Solution
from tests.helpers import ROOT, semver_tags


def _report(name: str, status: VersionStatus = VersionStatus.SUCCEEDED) -> VersionReport:
    return VersionReport(ROOT, Version.tag(name), status)


class TestReportAggregator:

    def test_order_follows_index_not_arrival(self) -> None:
        agg = ReportAggregator(ROOT, 3)
        agg.record(2, _report("1.2.0"))
        agg.record(0, _report("1.0.0"))
        assert not agg.complete
        agg.record(1, _report("1.1.0", VersionStatus.SOLVE_FAILED))
        assert agg.complete
        report = agg.build()
        assert [e.version.name for e in report.entries] == ["1.0.0", "1.1.0", "1.2.0"]

    def test_duplicate_record_rejected(self) -> None:
        agg = ReportAggregator(ROOT, 1)
        agg.record(0, _report("1.0.0"))
        with pytest.raises(ValueError, match="already recorded"):
            agg.record(0, _report("1.0.0"))

    def test_incomplete_build_rejected(self) -> None:
        agg = ReportAggregator(ROOT, 2)
        agg.record(0, _report("1.0.0"))
        with pytest.raises(RuntimeError, match=r"\[1\]"):
            agg.build()


class TestSweepReport:

    def test_all_succeeded(self) -> None:
        report = SweepReport(ROOT, (_report("1.0.0"), _report("1.1.0")))
        assert not report.failed
        assert report.exit_code == 0

    def test_any_failure_fails(self) -> None:
        report = SweepReport(
            ROOT, (_report("1.0.0"), _report("1.1.0", VersionStatus.WRITE_FAILED))
        )
        assert report.failed
        assert report.exit_code == 1
        counts = report.counts()
        assert counts[VersionStatus.SUCCEEDED] == 1
        assert counts[VersionStatus.WRITE_FAILED] == 1
        assert counts[VersionStatus.VERIFY_FAILED] == 0

    def test_label(self) -> None:
        assert _report("v1.0.0").label == f"{ROOT}@v1.0.0"


class TestSolveOutcome:

    def test_requires_exactly_one_field(self) -> None:
        (version,) = semver_tags("1.0.0")
        with pytest.raises(ValueError):
            SolveOutcome(version)
        with pytest.raises(ValueError):
            SolveOutcome(version, solution=Solution(projects=()), error=RuntimeError("x"))
        assert SolveOutcome(version, error=RuntimeError("x")).ok is False
        assert SolveOutcome(version, solution=Solution(projects=())).ok
