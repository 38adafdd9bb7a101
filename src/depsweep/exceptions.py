"""depsweep exception hierarchy.

All public exceptions inherit from DepSweepError, giving callers a single
base class to catch when they want to handle any depsweep-specific failure
without swallowing unrelated errors.

The hierarchy mirrors how failures are treated by the sweep:

- ``UsageError`` --- bad arguments; nothing runs.
- ``SetupError`` --- an environment precondition failed; the sweep aborts
  before (or instead of) processing any version.
- ``PerVersionError`` --- a failure tied to one candidate version; recorded
  in the report, never escalated.
"""

from __future__ import annotations


class DepSweepError(Exception):
    """Base exception for all depsweep errors."""


# ---------------------------------------------------------------------------
# Usage errors
# ---------------------------------------------------------------------------


class UsageError(DepSweepError):
    """Raised when the caller supplied bad or conflicting arguments."""


class AmbiguousConstraint(UsageError):
    """Raised when more than one kind of version selector is supplied."""


class InvalidConstraintExpression(UsageError):
    """Raised when a semver range expression cannot be parsed."""


# ---------------------------------------------------------------------------
# Setup errors
# ---------------------------------------------------------------------------


class SetupError(DepSweepError):
    """Raised when a precondition of the sweep does not hold.

    Distinct from per-version errors: these describe the environment
    (resolver, catalog, vendor directory), not a dependency version.
    """


class ResolverInitFailed(SetupError):
    """Raised when the resolver or version source cannot be set up."""


class RootDeductionFailed(SetupError):
    """Raised when no canonical source root can be deduced for an identifier."""


class CatalogUnavailable(SetupError):
    """Raised when the version list of a source root cannot be retrieved."""


class NoVersionsFound(SetupError):
    """Raised when a source root exists but lists no versions at all."""


class NoMatchingVersions(SetupError):
    """Raised when versions exist but none satisfies the active constraint.

    Attributes:
        root: The source root whose catalog was filtered.
        constraint: The constraint that matched nothing.
        total: How many raw versions were examined.
    """

    def __init__(self, root: str, constraint: object, total: int) -> None:
        self.root = root
        self.constraint = constraint
        self.total = total
        super().__init__(
            f"{root} has {total} versions, but none matched constraint {constraint}"
        )


class VendorBackupFailed(SetupError):
    """Raised when the existing vendor tree cannot be moved aside."""


class VendorRestoreFailed(SetupError):
    """Raised when the backed-up vendor tree cannot be moved back."""


class ManifestError(SetupError):
    """Raised when the project manifest or lock file is malformed."""


# ---------------------------------------------------------------------------
# Per-version errors
# ---------------------------------------------------------------------------


class PerVersionError(DepSweepError):
    """Raised for failures scoped to a single candidate version."""


class SolveError(PerVersionError):
    """Raised when no consistent dependency solution exists for a version."""


class WriteError(PerVersionError):
    """Raised when a solution cannot be materialized into a vendor tree."""


class VerifyError(PerVersionError):
    """Raised when the verification command fails for a version."""


class ExecError(VerifyError):
    """Raised when the verification command cannot be launched at all."""


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------


class SourceError(DepSweepError):
    """Raised by version sources for unknown roots or unreadable catalogs."""
