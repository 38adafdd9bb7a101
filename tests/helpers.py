"""Shared test helpers: in-memory collaborators and on-disk registries."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Any

import yaml

from depsweep.config import SweepConfig
from depsweep.core.versions import Version
from depsweep.exceptions import SolveError, SourceError, WriteError
from depsweep.sources.base import (
    LockedProject,
    Resolver,
    Solution,
    SolveRequest,
    VersionSource,
)

ROOT = "example.com/lib/widget"


def semver_tags(*names: str) -> list[Version]:
    return [Version.tag(n) for n in names]


class FakeSource(VersionSource):
    """Version source serving one root from memory."""

    def __init__(
        self,
        versions: list[Version],
        root: str = ROOT,
        fail_listing: bool = False,
    ) -> None:
        self.root = root
        self.versions = versions
        self.fail_listing = fail_listing

    def deduce_root(self, identifier: str) -> str:
        if identifier == self.root or identifier.startswith(self.root + "/"):
            return self.root
        raise SourceError(f"unknown import path {identifier}")

    def list_versions(self, root: str) -> list[Version]:
        if self.fail_listing:
            raise SourceError("cache is corrupt")
        return list(self.versions)


class FakeResolver(Resolver):
    """Resolver whose outcome per version name is scripted.

    Export writes ``<vendor>/<root>/VERSION`` containing the version name.
    """

    def __init__(
        self,
        solve_failures: dict[str, str] | None = None,
        write_failures: set[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.solve_failures = solve_failures or {}
        self.write_failures = write_failures or set()
        self.delays = delays or {}
        self.requests: list[SolveRequest] = []
        self.exported: list[str] = []
        self._lock = threading.Lock()

    def solve(self, request: SolveRequest) -> Solution:
        with self._lock:
            self.requests.append(request)
        time.sleep(self.delays.get(request.pin.name, 0))
        if request.pin.name in self.solve_failures:
            raise SolveError(self.solve_failures[request.pin.name])
        return Solution(projects=(LockedProject(request.target, request.pin),))

    def export(self, solution: Solution, vendor_dir: Path) -> None:
        (project,) = solution.projects
        with self._lock:
            self.exported.append(project.version.name)
        if project.version.name in self.write_failures:
            vendor_dir.mkdir(parents=True, exist_ok=True)
            (vendor_dir / "partial").write_text("half written")
            raise WriteError("disk full")
        target = vendor_dir / project.root
        target.mkdir(parents=True)
        (target / "VERSION").write_text(project.version.name)

    @property
    def solved(self) -> list[str]:
        return [r.pin.name for r in self.requests]


def write_source(
    cache_dir: Path,
    root: str,
    versions: list[dict[str, Any]],
    with_trees: bool = True,
) -> Path:
    """Create ``<cache>/sources/<root>`` with a catalog and source trees."""
    source = cache_dir / "sources" / root
    source.mkdir(parents=True, exist_ok=True)
    (source / "versions.yaml").write_text(yaml.safe_dump({"versions": versions}))
    if with_trees:
        for entry in versions:
            tree = source / "trees" / entry["name"]
            tree.mkdir(parents=True, exist_ok=True)
            (tree / "VERSION").write_text(entry["name"])
    return source


def snapshot(directory: Path) -> dict[str, bytes]:
    """Map every file below *directory* to its bytes."""
    return {
        p.relative_to(directory).as_posix(): p.read_bytes()
        for p in sorted(directory.rglob("*"))
        if p.is_file()
    }


def make_config(project_dir: Path, **overrides: Any) -> SweepConfig:
    """Build a config for *project_dir* sweeping ``ROOT``."""
    values: dict[str, Any] = {
        "dependency": ROOT,
        "project_dir": project_dir,
        "workspace": project_dir.parent / "workspace",
        "cache_dir": project_dir.parent / "cache",
    }
    values.update(overrides)
    return SweepConfig(**values)
