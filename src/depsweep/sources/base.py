"""Capabilities the sweep consumes, and the values exchanged with them.

The sweep never resolves graphs, reads source catalogs, or parses manifests
itself. It talks to three collaborators through the abstract base classes
defined here:

- ``VersionSource`` --- deduces a dependency's source root and lists its
  versions.
- ``Resolver`` --- produces a consistent ``Solution`` for a ``SolveRequest``
  and exports it to disk.
- ``ManifestLoader`` --- reads the project's own constraints and lock pins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from depsweep.core.versions import Constraint, Version


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SolveRequest:
    """Everything a resolver needs to solve one candidate version.

    Attributes:
        project_dir: Root directory of the project under test.
        import_root: The project's own import path; dependencies on it are
            ignored.
        requirements: The project's declared constraints, target excluded.
        lock: Preferred version name per source root, target excluded.
        target: Source root of the dependency being swept.
        pin: The candidate version the target is fixed to.
    """

    project_dir: Path
    import_root: str
    requirements: Mapping[str, Constraint]
    lock: Mapping[str, str]
    target: str
    pin: Version


@dataclass(frozen=True)
class LockedProject:
    """One source root fixed at one version within a solution."""

    root: str
    version: Version


@dataclass(frozen=True)
class Solution:
    """A complete, mutually consistent set of resolved versions."""

    projects: tuple[LockedProject, ...] = ()

    def as_dict(self) -> dict[str, str]:
        """Return a root -> version-name mapping."""
        return {p.root: p.version.name for p in self.projects}

    def __len__(self) -> int:
        return len(self.projects)


@dataclass(frozen=True)
class ProjectManifest:
    """The project's declared constraints and lock pins.

    Attributes:
        requirements: Constraint per source root.
        lock: Locked version name per source root.
    """

    requirements: Mapping[str, Constraint] = field(
        default_factory=lambda: MappingProxyType({})
    )
    lock: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


class VersionSource(ABC):
    """Knows which source roots exist and which versions they offer."""

    @abstractmethod
    def deduce_root(self, identifier: str) -> str:
        """Return the canonical source root that *identifier* lives under.

        Raises:
            SourceError: If no root can be deduced.
        """

    @abstractmethod
    def list_versions(self, root: str) -> list[Version]:
        """Return every known version of *root*, in catalog order.

        Raises:
            SourceError: If the catalog cannot be read.
        """


class Resolver(ABC):
    """Produces and materializes dependency solutions.

    Implementations must keep ``solve`` free of state shared between calls
    so that candidate versions can be solved concurrently.
    """

    @abstractmethod
    def solve(self, request: SolveRequest) -> Solution:
        """Resolve the project with ``request.target`` pinned.

        Raises:
            SolveError: If no consistent solution exists.
        """

    @abstractmethod
    def export(self, solution: Solution, vendor_dir: Path) -> None:
        """Write the source trees of *solution* beneath *vendor_dir*.

        Raises:
            WriteError: If a tree cannot be written.
        """


class ManifestLoader(ABC):
    """Reads a package manager's manifest and lock for a project."""

    @abstractmethod
    def load(self, project_dir: Path) -> ProjectManifest | None:
        """Return the project's manifest, or None if it has none.

        Raises:
            ManifestError: If a manifest exists but cannot be parsed.
        """
