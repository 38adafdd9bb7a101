"""Version catalog: list a dependency's versions and filter them.

The catalog turns a dependency identifier into a non-empty, ordered
``CandidateSet``. Catalog order is preserved exactly as the version source
reports it; nothing here re-sorts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from depsweep.core.versions import Constraint, Version
from depsweep.exceptions import (
    CatalogUnavailable,
    NoMatchingVersions,
    NoVersionsFound,
    RootDeductionFailed,
    SourceError,
)
from depsweep.sources.base import VersionSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateSet:
    """The versions of one source root that satisfy a constraint.

    Attributes:
        root: Canonical source root.
        constraint: The constraint the versions were filtered with.
        versions: Matching versions, in catalog order. Never empty.
        total: Number of raw versions examined.
    """

    root: str
    constraint: Constraint
    versions: tuple[Version, ...]
    total: int

    def __iter__(self):
        return iter(self.versions)

    def __len__(self) -> int:
        return len(self.versions)


class VersionCatalog:
    """Queries a ``VersionSource`` and filters its versions.

    Args:
        source: The version source to query.
    """

    def __init__(self, source: VersionSource) -> None:
        self._source = source

    def deduce_root(self, identifier: str) -> str:
        """Return the canonical root of *identifier*.

        Raises:
            RootDeductionFailed: If the source cannot place the identifier.
        """
        try:
            return self._source.deduce_root(identifier)
        except SourceError as exc:
            raise RootDeductionFailed(
                f"Could not detect source info for {identifier}: {exc}"
            ) from exc

    def list_versions(self, root: str) -> list[Version]:
        """Return every version of *root*.

        Raises:
            CatalogUnavailable: If the source cannot list the versions.
            NoVersionsFound: If the source lists none.
        """
        try:
            versions = list(self._source.list_versions(root))
        except SourceError as exc:
            raise CatalogUnavailable(
                f"Could not retrieve version list for {root}: {exc}"
            ) from exc
        if not versions:
            raise NoVersionsFound(f"No versions could be located for {root}")
        return versions

    def select(self, root: str, constraint: Constraint) -> CandidateSet:
        """List *root*'s versions and keep those matching *constraint*.

        Raises:
            CatalogUnavailable: If the source cannot list the versions.
            NoVersionsFound: If the source lists none.
            NoMatchingVersions: If none of them match.
        """
        raw = self.list_versions(root)
        matched = tuple(v for v in raw if constraint.matches(v))
        if not matched:
            raise NoMatchingVersions(root, constraint, len(raw))
        logger.debug("%d of %d versions of %s match %s", len(matched), len(raw), root, constraint)
        return CandidateSet(root=root, constraint=constraint, versions=matched, total=len(raw))

    def candidates(self, identifier: str, constraint: Constraint) -> CandidateSet:
        """Deduce the root of *identifier* and select its matching versions."""
        return self.select(self.deduce_root(identifier), constraint)
