"""Rich output formatting helpers for the depsweep CLI.

One line per version, colored by status, with captured diagnostics printed
verbatim (markup-escaped) beneath failures.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from depsweep.core.catalog import CandidateSet
from depsweep.core.sweep.models import SweepReport, VersionReport, VersionStatus

_STATUS_STYLES: dict[VersionStatus, str] = {
    VersionStatus.SOLVE_FAILED: "bold red",
    VersionStatus.WRITE_FAILED: "red",
    VersionStatus.VERIFY_FAILED: "yellow",
    VersionStatus.SUCCEEDED: "bold green",
}

console = Console(highlight=False)


def status_style(status: VersionStatus) -> str:
    """Return the Rich style string for a version status."""
    return _STATUS_STYLES.get(status, "white")


def print_candidates(candidates: CandidateSet) -> None:
    """Print the preamble naming the versions about to be checked."""
    names = ", ".join(v.name for v in candidates)
    console.print(
        f"Checking [bold]{escape(candidates.root)}[/bold] with the following "
        f"versions: {escape(names)}",
        soft_wrap=True,
    )


def format_entry(entry: VersionReport, verified: bool = True) -> str:
    """Return the plain-text summary line for one version."""
    status = entry.status.value
    if entry.succeeded and not verified:
        status = "succeeded (materialize only)"
    return f"{entry.label} {status}"


def print_entry(entry: VersionReport, verified: bool = True) -> None:
    style = status_style(entry.status)
    console.print(f"[{style}]{escape(format_entry(entry, verified))}[/{style}]", soft_wrap=True)
    if entry.detail:
        console.print(escape(entry.detail), soft_wrap=True)


def print_sweep_report(report: SweepReport) -> None:
    """Print every version line in catalog order, then PASS or FAIL."""
    for entry in report.entries:
        print_entry(entry, report.verified)

    total = len(report.entries)
    failed = sum(1 for e in report.entries if not e.succeeded)
    if report.failed:
        console.print(
            f"[bold red]FAIL[/bold red]: {failed} of {total} versions of "
            f"{escape(report.root)} failed",
            soft_wrap=True,
        )
    else:
        console.print(
            f"[bold green]PASS[/bold green]: all {total} versions of "
            f"{escape(report.root)} succeeded",
            soft_wrap=True,
        )
