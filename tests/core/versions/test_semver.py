"""Tests for semantic version parsing, precedence, and range matching."""

from __future__ import annotations

import pytest

from depsweep.core.versions import parse_range, parse_semver, try_parse_semver


class TestParseSemver:
    """Tests for ``parse_semver`` and ``try_parse_semver``."""

    def test_plain_version(self) -> None:
        v = parse_semver("1.2.3")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)
        assert v.prerelease == ()

    def test_leading_v_accepted(self) -> None:
        assert parse_semver("v2.0.1") == parse_semver("2.0.1")

    def test_prerelease_and_build(self) -> None:
        v = parse_semver("1.0.0-rc.1+build.5")
        assert v.prerelease == ("rc", "1")
        assert v.build == "build.5"
        assert str(v) == "1.0.0-rc.1+build.5"

    @pytest.mark.parametrize("text", ["1.0", "01.0.0", "master", "1.0.0-", ""])
    def test_invalid_versions(self, text: str) -> None:
        with pytest.raises(ValueError):
            parse_semver(text)
        assert try_parse_semver(text) is None


class TestPrecedence:
    """SemVer 2.0.0 section 11 ordering."""

    def test_spec_example_chain(self) -> None:
        chain = [
            "1.0.0-alpha", "1.0.0-alpha.1", "1.0.0-alpha.beta", "1.0.0-beta",
            "1.0.0-beta.2", "1.0.0-beta.11", "1.0.0-rc.1", "1.0.0",
        ]
        parsed = [parse_semver(v) for v in chain]
        assert parsed == sorted(parsed)
        for lower, higher in zip(parsed, parsed[1:]):
            assert lower < higher

    def test_numeric_parts_compare_numerically(self) -> None:
        assert parse_semver("1.10.0") > parse_semver("1.9.0")

    def test_build_metadata_ignored(self) -> None:
        assert parse_semver("1.0.0+a") == parse_semver("1.0.0+b")


class TestRanges:
    """Tests for ``parse_range`` and ``SemverRange.contains``."""

    @pytest.mark.parametrize(
        "expr, inside, outside",
        [
            ("<2.0.0", ["1.9.9", "0.0.1"], ["2.0.0", "2.0.1"]),
            (">=1.0.0, <2.0.0", ["1.0.0", "1.5.0"], ["0.9.9", "2.0.0"]),
            (">=1.0.0 <2.0.0", ["1.2.3"], ["2.1.0"]),
            ("^1.2.3", ["1.2.3", "1.9.0"], ["1.2.2", "2.0.0"]),
            ("^0.2.3", ["0.2.3", "0.2.9"], ["0.3.0"]),
            ("^0.0.3", ["0.0.3"], ["0.0.4"]),
            ("~1.2.3", ["1.2.3", "1.2.9"], ["1.3.0"]),
            ("~1", ["1.0.0", "1.9.9"], ["2.0.0"]),
            ("1.2.x", ["1.2.0", "1.2.7"], ["1.3.0", "1.1.9"]),
            ("1", ["1.0.0", "1.99.0"], ["2.0.0"]),
            ("*", ["0.0.1", "9.9.9"], []),
            ("1.2 - 1.4.5", ["1.2.0", "1.4.5"], ["1.4.6", "1.1.9"]),
            ("1.2 - 1.4", ["1.4.9"], ["1.5.0"]),
            ("<=1.2", ["1.2.9"], ["1.3.0"]),
            (">1.2", ["1.3.0"], ["1.2.9"]),
            ("!=1.0.0", ["1.0.1"], ["1.0.0"]),
            ("^1.0.0 || ^3.0.0", ["1.4.0", "3.1.0"], ["2.0.0"]),
            ("= 1.0.0", ["1.0.0"], ["1.0.1"]),
        ],
    )
    def test_membership(self, expr: str, inside: list[str], outside: list[str]) -> None:
        rng = parse_range(expr)
        for v in inside:
            assert rng.contains(parse_semver(v)), f"{v} should satisfy {expr}"
        for v in outside:
            assert not rng.contains(parse_semver(v)), f"{v} should not satisfy {expr}"

    def test_prerelease_excluded_without_matching_comparator(self) -> None:
        rng = parse_range("<2.0.0")
        assert not rng.contains(parse_semver("2.0.0-rc.1"))
        assert not rng.contains(parse_semver("1.5.0-beta"))

    def test_prerelease_allowed_by_same_tuple_comparator(self) -> None:
        rng = parse_range(">=1.5.0-alpha, <2.0.0")
        assert rng.contains(parse_semver("1.5.0-beta"))
        assert not rng.contains(parse_semver("1.6.0-beta"))

    @pytest.mark.parametrize(
        "expr", ["", "   ", ">=", "not-a-range", "1.0.0 ||", "!=1.2", "<*", "^1.x.x-rc"]
    )
    def test_malformed_ranges_rejected(self, expr: str) -> None:
        with pytest.raises(ValueError):
            parse_range(expr)
