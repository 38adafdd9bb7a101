"""Semantic version parsing, precedence, and range matching.

Precedence follows SemVer 2.0.0 section 11: major, minor and patch compare
numerically, a pre-release version has lower precedence than the associated
normal version, pre-release identifiers compare numerically when both are
numeric and lexically otherwise, and build metadata is ignored.

Range grammar (npm / Masterminds flavoured):

- Comparators: ``=``, ``==``, ``!=``, ``>``, ``>=``, ``<``, ``<=``,
  ``~``, ``~>``, ``^``.
- Partial versions (``1``, ``1.2``) and wildcards (``1.x``, ``1.2.*``, ``*``).
- Hyphen ranges: ``1.2 - 1.4.5``.
- Comparators separated by commas or whitespace must all hold (AND).
- Comparator sets separated by ``||`` are alternatives (OR).

Pre-release versions only satisfy a comparator set that names a pre-release
of the same ``major.minor.patch``, so ``<2.0.0`` does not admit ``2.0.0-rc.1``.

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Version parsing
# ---------------------------------------------------------------------------

_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<pre>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?$"
)

# Partial version inside a range: missing or wildcard parts are None.
_PARTIAL_RE = re.compile(
    r"^v?(?P<major>\d+|[xX*])"
    r"(?:\.(?P<minor>\d+|[xX*]))?"
    r"(?:\.(?P<patch>\d+|[xX*]))?"
    r"(?:-(?P<pre>[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*))?"
    r"(?:\+[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*)?$"
)

_COMPARATOR_RE = re.compile(r"^(?P<op>==|!=|>=|<=|~>|=|>|<|\^|~)?\s*(?P<ver>\S+)$")

_WILDCARDS = frozenset({"x", "X", "*"})

_HYPHEN_RE = re.compile(r"\s+-\s+")


def _identifier_key(ident: str) -> tuple[int, int | str]:
    # Numeric identifiers sort before alphanumeric ones.
    if ident.isdigit():
        return (0, int(ident))
    return (1, ident)


@dataclass(frozen=True)
class SemVer:
    """A parsed semantic version.

    Equality and ordering use SemVer precedence, so ``1.0.0+a == 1.0.0+b``.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: str = field(default="", compare=False)

    @property
    def release(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def precedence_key(self) -> tuple:
        """Sort key implementing SemVer 2.0.0 precedence."""
        if not self.prerelease:
            pre: tuple = (1,)
        else:
            pre = (0, tuple(_identifier_key(p) for p in self.prerelease))
        return (self.major, self.minor, self.patch, pre)

    def __lt__(self, other: SemVer) -> bool:
        return self.precedence_key() < other.precedence_key()

    def __le__(self, other: SemVer) -> bool:
        return self.precedence_key() <= other.precedence_key()

    def __gt__(self, other: SemVer) -> bool:
        return self.precedence_key() > other.precedence_key()

    def __ge__(self, other: SemVer) -> bool:
        return self.precedence_key() >= other.precedence_key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + self.build
        return text


def parse_semver(text: str) -> SemVer:
    """Parse a full semantic version, accepting an optional leading ``v``.

    Args:
        text: Version string such as ``"1.2.3"``, ``"v0.1.0-alpha.1"``.

    Returns:
        The parsed ``SemVer``.

    Raises:
        ValueError: If the string is not a valid semantic version.
    """
    m = _SEMVER_RE.match(text.strip())
    if not m:
        raise ValueError(f"Invalid semantic version: {text!r}")
    pre = m.group("pre")
    return SemVer(
        int(m.group("major")),
        int(m.group("minor")),
        int(m.group("patch")),
        tuple(pre.split(".")) if pre else (),
        m.group("build") or "",
    )


def try_parse_semver(text: str) -> SemVer | None:
    """Return the parsed version, or None when *text* is not semver."""
    try:
        return parse_semver(text)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Comparator:
    op: str  # one of "=", "!=", ">", ">=", "<", "<="
    version: SemVer

    def test(self, v: SemVer) -> bool:
        a, b = v.precedence_key(), self.version.precedence_key()
        if self.op == "=":
            return a == b
        if self.op == "!=":
            return a != b
        if self.op == ">":
            return a > b
        if self.op == ">=":
            return a >= b
        if self.op == "<":
            return a < b
        return a <= b


def _parse_partial(text: str) -> tuple[int | None, int | None, int | None, tuple[str, ...]]:
    m = _PARTIAL_RE.match(text)
    if not m:
        raise ValueError(f"Invalid version in range: {text!r}")
    parts: list[int | None] = []
    wild = False
    for name in ("major", "minor", "patch"):
        raw = m.group(name)
        if raw is None or raw in _WILDCARDS or wild:
            wild = True
            parts.append(None)
        else:
            parts.append(int(raw))
    pre = m.group("pre")
    if pre and None in parts:
        raise ValueError(f"Pre-release on a partial version: {text!r}")
    return parts[0], parts[1], parts[2], tuple(pre.split(".")) if pre else ()


def _lower(major: int | None, minor: int | None, patch: int | None,
           pre: tuple[str, ...]) -> SemVer:
    return SemVer(major or 0, minor or 0, patch or 0, pre)


def _next_up(major: int | None, minor: int | None) -> SemVer:
    # Exclusive upper bound of a partial version's wildcard span.
    if minor is None:
        return SemVer((major or 0) + 1, 0, 0)
    return SemVer(major or 0, minor + 1, 0)


def _expand(op: str, text: str) -> list[_Comparator]:
    """Expand one comparator token into primitive comparators."""
    major, minor, patch, pre = _parse_partial(text)
    full = patch is not None

    if major is None:
        # "*", "x", ">=*" and friends admit everything.
        if op in ("<", "!=", ">"):
            raise ValueError(f"Unsatisfiable wildcard comparator: {op}{text}")
        return []

    exact = _lower(major, minor, patch, pre)

    if op in ("", "=", "=="):
        if full:
            return [_Comparator("=", exact)]
        return [_Comparator(">=", exact), _Comparator("<", _next_up(major, minor))]
    if op == "!=":
        if not full:
            raise ValueError(f"'!=' requires a full version: {text!r}")
        return [_Comparator("!=", exact)]
    if op == ">":
        if full:
            return [_Comparator(">", exact)]
        return [_Comparator(">=", _next_up(major, minor))]
    if op == ">=":
        return [_Comparator(">=", exact)]
    if op == "<":
        return [_Comparator("<", exact)]
    if op == "<=":
        if full:
            return [_Comparator("<=", exact)]
        return [_Comparator("<", _next_up(major, minor))]
    if op in ("~", "~>"):
        return [_Comparator(">=", exact), _Comparator("<", _next_up(major, minor))]
    if op == "^":
        if major > 0 or minor is None:
            upper = SemVer(major + 1, 0, 0)
        elif minor > 0 or patch is None:
            upper = SemVer(0, minor + 1, 0)
        else:
            upper = SemVer(0, 0, patch + 1)
        return [_Comparator(">=", exact), _Comparator("<", upper)]
    raise ValueError(f"Unknown operator: {op!r}")  # pragma: no cover


def _hyphen(low: str, high: str) -> list[_Comparator]:
    lmaj, lmin, lpat, lpre = _parse_partial(low)
    hmaj, hmin, hpat, hpre = _parse_partial(high)
    comps: list[_Comparator] = []
    if lmaj is not None:
        comps.append(_Comparator(">=", _lower(lmaj, lmin, lpat, lpre)))
    if hmaj is not None:
        if hpat is not None:
            comps.append(_Comparator("<=", SemVer(hmaj, hmin or 0, hpat, hpre)))
        else:
            comps.append(_Comparator("<", _next_up(hmaj, hmin)))
    return comps


def _tokenize(group: str) -> list[str]:
    # Attach a detached operator (">= 1.0.0") to the version that follows it.
    raw = group.replace(",", " ").split()
    tokens: list[str] = []
    pending = ""
    for tok in raw:
        if pending:
            tokens.append(pending + tok)
            pending = ""
        elif tok in ("=", "==", "!=", ">", ">=", "<", "<=", "~", "~>", "^"):
            pending = tok
        else:
            tokens.append(tok)
    if pending:
        raise ValueError(f"Dangling operator {pending!r}")
    return tokens


def _parse_group(group: str) -> tuple[_Comparator, ...]:
    if _HYPHEN_RE.search(group):
        low, high = _HYPHEN_RE.split(group, maxsplit=1)
        if "," in group or len(low.split()) != 1 or len(high.split()) != 1:
            raise ValueError(f"Malformed hyphen range: {group!r}")
        return tuple(_hyphen(low.strip(), high.strip()))

    tokens = _tokenize(group)
    if not tokens:
        raise ValueError("Empty comparator set")
    comps: list[_Comparator] = []
    for tok in tokens:
        m = _COMPARATOR_RE.match(tok)
        if not m:
            raise ValueError(f"Invalid comparator: {tok!r}")
        comps.extend(_expand(m.group("op") or "", m.group("ver")))
    return tuple(comps)


@dataclass(frozen=True)
class SemverRange:
    """A parsed semver range expression.

    Attributes:
        raw: The expression as authored (e.g., ``">=1.0.0, <2.0.0 || ^3"``).
    """

    raw: str
    groups: tuple[tuple[_Comparator, ...], ...] = field(repr=False, compare=False)

    def contains(self, version: SemVer) -> bool:
        """Return True if *version* satisfies any comparator set."""
        return any(self._group_allows(g, version) for g in self.groups)

    @staticmethod
    def _group_allows(group: tuple[_Comparator, ...], version: SemVer) -> bool:
        if not all(c.test(version) for c in group):
            return False
        if not version.is_prerelease:
            return True
        return any(
            c.version.is_prerelease and c.version.release == version.release
            for c in group
        )

    def __str__(self) -> str:
        return self.raw


def parse_range(expression: str) -> SemverRange:
    """Parse a semver range expression.

    Raises:
        ValueError: If the expression is empty or malformed.
    """
    if not expression or not expression.strip():
        raise ValueError("Empty semver range")
    groups = tuple(_parse_group(g.strip()) for g in expression.split("||"))
    return SemverRange(raw=expression.strip(), groups=groups)
