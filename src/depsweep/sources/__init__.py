"""Concrete collaborators: version source, resolver, and manifest loader.

Public API::

    from depsweep.sources import open_backend
    registry, resolver = open_backend(Path("~/.depsweep/cache").expanduser())
"""

from __future__ import annotations

from pathlib import Path

from depsweep.exceptions import ResolverInitFailed
from depsweep.sources.base import (
    LockedProject,
    ManifestLoader,
    ProjectManifest,
    Resolver,
    Solution,
    SolveRequest,
    VersionSource,
)
from depsweep.sources.manifest import YamlManifestLoader
from depsweep.sources.registry import LocalRegistry
from depsweep.sources.resolver import SatResolver


def open_backend(cache_dir: Path) -> tuple[LocalRegistry, SatResolver]:
    """Build the registry-backed version source and resolver.

    Raises:
        ResolverInitFailed: If the cache directory holds no sources.
    """
    registry = LocalRegistry(cache_dir)
    if not registry.sources_dir.is_dir():
        raise ResolverInitFailed(
            f"Failed to set up source cache: {registry.sources_dir} does not exist"
        )
    return registry, SatResolver(registry)


__all__ = [
    "LocalRegistry",
    "LockedProject",
    "ManifestLoader",
    "ProjectManifest",
    "Resolver",
    "SatResolver",
    "Solution",
    "SolveRequest",
    "VersionSource",
    "YamlManifestLoader",
    "open_backend",
]
