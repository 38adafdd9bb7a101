"""Version constraints: which versions of a dependency are acceptable.

A constraint is exactly one of:

- ``AnyConstraint`` --- every version.
- ``BranchConstraint`` --- one named branch.
- ``ExactVersionConstraint`` --- one tag or revision, by exact name.
- ``SemverRangeConstraint`` --- every semver tag inside a range.

``resolve_constraint`` turns the caller's selectors into one of these and
refuses to guess when more than one selector is supplied.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from depsweep.core.versions.models import Version, VersionKind
from depsweep.core.versions.semver import SemverRange, parse_range
from depsweep.exceptions import AmbiguousConstraint, InvalidConstraintExpression

_EXACT_KINDS = frozenset({VersionKind.SEMVER, VersionKind.TAG, VersionKind.REVISION})


class Constraint(ABC):
    """Base class for the constraint variants."""

    @abstractmethod
    def matches(self, version: Version) -> bool:
        """Return True if *version* is acceptable under this constraint."""


@dataclass(frozen=True)
class AnyConstraint(Constraint):
    """Matches every version."""

    def matches(self, version: Version) -> bool:
        return True

    def __str__(self) -> str:
        return "*"


@dataclass(frozen=True)
class BranchConstraint(Constraint):
    """Matches the branch with exactly this name."""

    name: str

    def matches(self, version: Version) -> bool:
        return version.kind is VersionKind.BRANCH and version.name == self.name

    def __str__(self) -> str:
        return f"branch {self.name}"


@dataclass(frozen=True)
class ExactVersionConstraint(Constraint):
    """Matches a tag or revision with exactly this name.

    Revisions also match on their underlying revision identifier.
    """

    name: str

    def matches(self, version: Version) -> bool:
        if version.kind not in _EXACT_KINDS:
            return False
        if version.name == self.name:
            return True
        return version.kind is VersionKind.REVISION and version.revision == self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class SemverRangeConstraint(Constraint):
    """Matches semver tags inside a range; never matches anything else."""

    expression: str
    range: SemverRange = field(repr=False, compare=False)

    @classmethod
    def parse(cls, expression: str) -> SemverRangeConstraint:
        try:
            parsed = parse_range(expression)
        except ValueError as exc:
            raise InvalidConstraintExpression(
                f"{expression} is not a valid semver constraint: {exc}"
            ) from exc
        return cls(expression=parsed.raw, range=parsed)

    def matches(self, version: Version) -> bool:
        sv = version.semver
        return sv is not None and self.range.contains(sv)

    def __str__(self) -> str:
        return self.expression


def resolve_constraint(
    branch: str | None = None,
    version: str | None = None,
    semver: str | None = None,
) -> Constraint:
    """Turn at most one version selector into a constraint.

    Args:
        branch: Branch name to check.
        version: Exact tag or revision to check.
        semver: Semver range expression to check.

    Returns:
        ``AnyConstraint`` when no selector is given, otherwise the variant for
        the one selector supplied. Empty strings count as not supplied.

    Raises:
        AmbiguousConstraint: If two or more selectors are supplied.
        InvalidConstraintExpression: If *semver* does not parse.
    """
    supplied = [
        name for name, value in
        (("branch", branch), ("version", version), ("semver", semver))
        if value
    ]
    if len(supplied) > 1:
        raise AmbiguousConstraint(
            "Please specify only one type of constraint - branch, version, "
            f"or semver (got {', '.join(supplied)})"
        )
    if branch:
        return BranchConstraint(branch)
    if version:
        return ExactVersionConstraint(version)
    if semver:
        return SemverRangeConstraint.parse(semver)
    return AnyConstraint()


def constraint_from_spec(value: Any) -> Constraint:
    """Parse the manifest form of a constraint.

    A string is a semver range (``"*"`` or ``""`` meaning any); a mapping
    holds exactly one of ``branch``, ``version`` or ``semver``.

    Raises:
        InvalidConstraintExpression: If the value has an unsupported shape.
        AmbiguousConstraint: If a mapping names more than one selector.
    """
    if value is None:
        return AnyConstraint()
    if isinstance(value, str):
        if value.strip() in ("", "*"):
            return AnyConstraint()
        return SemverRangeConstraint.parse(value)
    if isinstance(value, dict):
        unknown = set(value) - {"branch", "version", "semver"}
        if unknown:
            raise InvalidConstraintExpression(
                f"Unknown constraint keys: {', '.join(sorted(map(str, unknown)))}"
            )
        return resolve_constraint(
            branch=_str_or_none(value.get("branch")),
            version=_str_or_none(value.get("version")),
            semver=_str_or_none(value.get("semver")),
        )
    raise InvalidConstraintExpression(f"Unsupported constraint value: {value!r}")


def _str_or_none(value: Any) -> str | None:
    return None if value is None else str(value)
