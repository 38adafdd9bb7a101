"""Sweep configuration.

One immutable ``SweepConfig`` is built by the CLI and passed explicitly to
every stage; no component reads environment variables or module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from depsweep.core.versions import AnyConstraint, Constraint
from depsweep.exceptions import UsageError

DEFAULT_CACHE_DIR = Path("~/.depsweep/cache")
DEFAULT_WORKSPACE = Path("~/workspace")

VENDOR_DIRNAME = "vendor"
BACKUP_DIRNAME = "_origvendor"


@dataclass(frozen=True)
class SweepConfig:
    """Everything one sweep run needs to know.

    Attributes:
        dependency: Import path of the dependency to sweep.
        project_dir: Root directory of the project under test.
        constraint: Explicitly requested constraint (``AnyConstraint`` when
            the caller gave none).
        run_command: Verification command, or None for materialize-only runs.
        use_manifest: Narrow the sweep with the manifest's constraint when no
            explicit constraint was given.
        workers: Upper bound on concurrently processed versions.
        timeout: Seconds before a verification command is killed, or None.
        cache_dir: Directory holding cached source catalogs and trees.
        workspace: Workspace whose ``src`` directory maps import paths.
    """

    dependency: str
    project_dir: Path
    constraint: Constraint = field(default_factory=AnyConstraint)
    run_command: str | None = None
    use_manifest: bool = True
    workers: int = 1
    timeout: float | None = None
    cache_dir: Path = DEFAULT_CACHE_DIR
    workspace: Path = DEFAULT_WORKSPACE

    def __post_init__(self) -> None:
        if not self.dependency.strip():
            raise UsageError("You must specify a single dependency to check against its versions.")
        if self.workers < 1:
            raise UsageError(f"workers must be at least 1, got {self.workers}")
        if self.timeout is not None and self.timeout <= 0:
            raise UsageError(f"timeout must be positive, got {self.timeout}")
        if self.run_command is not None and not self.run_command.split():
            raise UsageError("The --run command must not be blank.")

    @property
    def verifies(self) -> bool:
        return self.run_command is not None

    @property
    def explicit_constraint(self) -> bool:
        return not isinstance(self.constraint, AnyConstraint)

    @property
    def vendor_dir(self) -> Path:
        return self.project_dir / VENDOR_DIRNAME

    @property
    def backup_dir(self) -> Path:
        return self.project_dir / BACKUP_DIRNAME
