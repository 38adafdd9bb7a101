"""depsweep CLI --- ensure a build works across a dependency's versions.

Entry point for the ``depsweep`` command-line tool.

For example, if your project depends on example.com/foo/bar and three
versions of it exist, depsweep determines whether a consistent dependency
solution exists for each of them::

    depsweep example.com/foo/bar
    depsweep example.com/foo/bar --semver "<2.0.0"
    depsweep example.com/foo/bar --branch main --run "make test"

Exit Codes:
    0 --- Every candidate version succeeded.
    1 --- At least one version failed, or the sweep could not be set up.
    2 --- Bad arguments.
    130 --- Interrupted; with --run, the original vendor tree has been restored.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from depsweep import __version__
from depsweep.cli.output import print_candidates, print_sweep_report
from depsweep.config import DEFAULT_CACHE_DIR, DEFAULT_WORKSPACE, SweepConfig
from depsweep.core.sweep import SweepEngine
from depsweep.core.versions import resolve_constraint
from depsweep.exceptions import SetupError, UsageError
from depsweep.sources import YamlManifestLoader, open_backend


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.command("depsweep")
@click.version_option(version=__version__)
@click.argument("dependency")
@click.option("--branch", default=None, help="Branch to check.")
@click.option("--tag", default=None, help="Exact version, tag or revision to check.")
@click.option(
    "--semver", "-v", default=None,
    help="Semantic version (range or single version) to check.",
)
@click.option(
    "--run", "-r", "run_command", default=None,
    help="Additional command to run (e.g. 'make test') as a check. "
         "Split on whitespace; quoting is not supported.",
)
@click.option(
    "--no-pm", "no_pm", is_flag=True, default=False,
    help="Check every version instead of narrowing to the project manifest's constraint.",
)
@click.option(
    "--workers", "-j", type=click.IntRange(min=1), default=1, show_default=True,
    help="Number of versions to process concurrently.",
)
@click.option(
    "--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
    help="Seconds before a --run command is killed (default: no limit).",
)
@click.option(
    "--project-dir", type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".", help="Project root (default: current directory).",
)
@click.option(
    "--cache-dir", type=click.Path(path_type=Path), envvar="DEPSWEEP_CACHE",
    default=str(DEFAULT_CACHE_DIR), show_default=True,
    help="Source cache directory.",
)
@click.option(
    "--workspace", type=click.Path(path_type=Path), envvar="DEPSWEEP_WORKSPACE",
    default=str(DEFAULT_WORKSPACE), show_default=True,
    help="Workspace whose src/ directory maps import paths.",
)
@click.option("--verbose", is_flag=True, default=False, help="Show debug logging.")
def cli(
    dependency: str,
    branch: str | None,
    tag: str | None,
    semver: str | None,
    run_command: str | None,
    no_pm: bool,
    workers: int,
    timeout: float | None,
    project_dir: Path,
    cache_dir: Path,
    workspace: Path,
    verbose: bool,
) -> None:
    """Check DEPENDENCY across every acceptable version.

    By default depsweep only determines whether a dependency solution exists
    and can be written for each version. With --run, the command is also
    executed against each solution's vendor tree.

    Unless --no-pm is given, a constraint on DEPENDENCY in the project's
    depsweep.yaml narrows the versions checked when no explicit --branch,
    --tag or --semver is passed.
    """
    _configure_logging(verbose)

    try:
        config = SweepConfig(
            dependency=dependency,
            project_dir=project_dir.resolve(),
            constraint=resolve_constraint(branch=branch, version=tag, semver=semver),
            run_command=run_command,
            use_manifest=not no_pm,
            workers=workers,
            timeout=timeout,
            cache_dir=cache_dir.expanduser(),
            workspace=workspace.expanduser(),
        )
    except UsageError as exc:
        raise click.UsageError(str(exc)) from exc

    guarded = False
    try:
        registry, resolver = open_backend(config.cache_dir)
        engine = SweepEngine(config, registry, resolver, YamlManifestLoader())
        plan = engine.plan()
        print_candidates(plan.candidates)
        guarded = config.verifies
        report = engine.run(plan)
    except SetupError as exc:
        click.echo(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        if guarded:
            click.echo("Interrupted; vendor directory restored.")
        else:
            click.echo("Interrupted.")
        sys.exit(130)

    print_sweep_report(report)
    sys.exit(report.exit_code)
