"""Version identifiers, semantic versions, and constraints.

All public names are re-exported here so callers can write
``from depsweep.core.versions import Version, resolve_constraint``.
"""

from depsweep.core.versions.constraints import (
    AnyConstraint,
    BranchConstraint,
    Constraint,
    ExactVersionConstraint,
    SemverRangeConstraint,
    constraint_from_spec,
    resolve_constraint,
)
from depsweep.core.versions.models import Version, VersionKind
from depsweep.core.versions.semver import (
    SemVer,
    SemverRange,
    parse_range,
    parse_semver,
    try_parse_semver,
)

__all__ = [
    "AnyConstraint",
    "BranchConstraint",
    "Constraint",
    "ExactVersionConstraint",
    "SemVer",
    "SemverRange",
    "SemverRangeConstraint",
    "Version",
    "VersionKind",
    "constraint_from_spec",
    "parse_range",
    "parse_semver",
    "resolve_constraint",
    "try_parse_semver",
]
