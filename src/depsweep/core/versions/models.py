"""Version identifiers as reported by a version source."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from depsweep.core.versions.semver import SemVer, try_parse_semver


class VersionKind(Enum):
    """What a version identifier refers to in its source."""

    BRANCH = "branch"
    SEMVER = "semver"
    TAG = "tag"
    REVISION = "revision"


@dataclass(frozen=True)
class Version:
    """An immutable version identifier of a source root.

    Attributes:
        name: The identifier as listed by the source (branch, tag or revision).
        kind: What the identifier refers to.
        revision: The underlying revision, when the source knows it.
    """

    name: str
    kind: VersionKind
    revision: str = ""

    @classmethod
    def tag(cls, name: str, revision: str = "") -> Version:
        """Build a tag version, classifying it as SEMVER when it parses."""
        kind = VersionKind.SEMVER if try_parse_semver(name) else VersionKind.TAG
        return cls(name=name, kind=kind, revision=revision)

    @classmethod
    def branch(cls, name: str, revision: str = "") -> Version:
        return cls(name=name, kind=VersionKind.BRANCH, revision=revision)

    @property
    def semver(self) -> SemVer | None:
        """The parsed semantic version for SEMVER tags, else None."""
        if self.kind is not VersionKind.SEMVER:
            return None
        return try_parse_semver(self.name)

    def __str__(self) -> str:
        return self.name
