"""Tests for ``SweepConfig`` validation and workspace import roots."""

from __future__ import annotations

from pathlib import Path

import pytest

from depsweep.config import SweepConfig
from depsweep.core.versions import AnyConstraint, BranchConstraint
from depsweep.exceptions import UsageError
from depsweep.workspace import derive_import_root


class TestSweepConfig:

    def test_defaults(self, tmp_path: Path) -> None:
        config = SweepConfig(dependency="example.com/lib/widget", project_dir=tmp_path)
        assert config.constraint == AnyConstraint()
        assert not config.verifies
        assert not config.explicit_constraint
        assert config.vendor_dir == tmp_path / "vendor"
        assert config.backup_dir == tmp_path / "_origvendor"

    def test_explicit_constraint(self, tmp_path: Path) -> None:
        config = SweepConfig(
            dependency="example.com/lib/widget",
            project_dir=tmp_path,
            constraint=BranchConstraint("main"),
            run_command="make test",
        )
        assert config.explicit_constraint
        assert config.verifies

    @pytest.mark.parametrize(
        "overrides",
        [
            {"dependency": "  "},
            {"workers": 0},
            {"timeout": 0},
            {"run_command": " \t"},
        ],
    )
    def test_invalid(self, tmp_path: Path, overrides: dict) -> None:
        values = {"dependency": "example.com/lib/widget", "project_dir": tmp_path}
        values.update(overrides)
        with pytest.raises(UsageError):
            SweepConfig(**values)

    def test_frozen(self, tmp_path: Path) -> None:
        config = SweepConfig(dependency="example.com/lib/widget", project_dir=tmp_path)
        with pytest.raises(AttributeError):
            config.workers = 4  # type: ignore[misc]


class TestDeriveImportRoot:

    def test_under_workspace(self, tmp_path: Path) -> None:
        project = tmp_path / "ws" / "src" / "example.com" / "team" / "app"
        project.mkdir(parents=True)
        assert derive_import_root(project, tmp_path / "ws") == "example.com/team/app"

    def test_outside_workspace(self, tmp_path: Path) -> None:
        project = tmp_path / "elsewhere" / "app"
        project.mkdir(parents=True)
        assert derive_import_root(project, tmp_path / "ws") == "app"

    def test_src_itself(self, tmp_path: Path) -> None:
        src = tmp_path / "ws" / "src"
        src.mkdir(parents=True)
        assert derive_import_root(src, tmp_path / "ws") == "src"
