"""File-backed version source over the depsweep cache directory.

Layout::

    <cache>/sources/<root>/versions.yaml
    <cache>/sources/<root>/trees/<version-name>/...

``versions.yaml`` lists the versions of one source root in catalog order::

    versions:
      - name: v1.0.0
        revision: 4f1c2e0
        requires:
          example.com/lib/log: ">=1.2.0, <2.0.0"
          example.com/lib/fmt: {branch: main}
      - name: main
        kind: branch

``kind`` defaults to ``tag``; tags whose names parse as semantic versions are
classified as semver tags. ``requires`` maps source roots to constraint specs
(see ``constraint_from_spec``).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from depsweep.core.versions import Constraint, Version, VersionKind, constraint_from_spec
from depsweep.exceptions import DepSweepError, SourceError
from depsweep.sources.base import VersionSource

logger = logging.getLogger(__name__)

INDEX_FILENAME = "versions.yaml"

_KINDS: dict[str, VersionKind] = {
    "branch": VersionKind.BRANCH,
    "tag": VersionKind.TAG,
    "revision": VersionKind.REVISION,
}


class LocalRegistry(VersionSource):
    """Version source reading catalogs from ``<cache_dir>/sources``.

    Every call reads from disk; nothing is memoized between calls.

    Args:
        cache_dir: The depsweep cache directory.
    """

    def __init__(self, cache_dir: Path) -> None:
        self._sources = Path(cache_dir) / "sources"

    @property
    def sources_dir(self) -> Path:
        return self._sources

    def deduce_root(self, identifier: str) -> str:
        """Return the longest prefix of *identifier* that has a catalog.

        ``example.com/org/repo/sub/pkg`` resolves to ``example.com/org/repo``
        when that directory holds a ``versions.yaml``.
        """
        parts = [p for p in identifier.strip().strip("/").split("/") if p]
        if not parts or any(p in (".", "..") for p in parts):
            raise SourceError(f"Invalid import path: {identifier!r}")
        for end in range(len(parts), 0, -1):
            candidate = "/".join(parts[:end])
            if (self._sources / candidate / INDEX_FILENAME).is_file():
                logger.debug("Deduced root %s for %s", candidate, identifier)
                return candidate
        raise SourceError(f"No source known for {identifier} under {self._sources}")

    def list_versions(self, root: str) -> list[Version]:
        return [version for version, _ in self.entries(root)]

    def tree_path(self, root: str, version: Version) -> Path:
        """Return where the source tree of *root* at *version* is cached."""
        return self._sources / root / "trees" / version.name

    def entries(self, root: str) -> list[tuple[Version, dict[str, Constraint]]]:
        """Return (version, requirements) pairs of *root* in catalog order.

        Raises:
            SourceError: If the catalog is missing or malformed.
        """
        index = self._sources / root / INDEX_FILENAME
        try:
            data = yaml.safe_load(index.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceError(f"Cannot read catalog {index}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise SourceError(f"Malformed catalog {index}: {exc}") from exc

        if data is None:
            return []
        if not isinstance(data, dict) or not isinstance(data.get("versions", []), list):
            raise SourceError(f"Malformed catalog {index}: expected a 'versions' list")

        entries = []
        for raw in data.get("versions") or []:
            entries.append(_parse_entry(index, raw))
        return entries


def _parse_entry(index: Path, raw: Any) -> tuple[Version, dict[str, Constraint]]:
    if isinstance(raw, str):
        raw = {"name": raw}
    if not isinstance(raw, dict) or not raw.get("name"):
        raise SourceError(f"Malformed entry in {index}: {raw!r}")

    name = str(raw["name"])
    revision = str(raw.get("revision") or "")
    kind_name = str(raw.get("kind", "tag")).lower()
    if kind_name not in _KINDS:
        raise SourceError(f"Unknown version kind {kind_name!r} in {index}")

    kind = _KINDS[kind_name]
    if kind is VersionKind.TAG:
        version = Version.tag(name, revision)
    else:
        version = Version(name=name, kind=kind, revision=revision)

    declared = raw.get("requires") or {}
    if not isinstance(declared, dict):
        raise SourceError(f"Malformed entry in {index}: 'requires' must be a mapping")

    requires: dict[str, Constraint] = {}
    for dep_root, spec in declared.items():
        try:
            requires[str(dep_root)] = constraint_from_spec(spec)
        except DepSweepError as exc:
            raise SourceError(
                f"Bad requirement on {dep_root} in {index} ({name}): {exc}"
            ) from exc
    return version, requires
