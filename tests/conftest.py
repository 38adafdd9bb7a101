"""Shared fixtures for depsweep tests."""

import pathlib

import pytest

from tests.helpers import ROOT, write_source


@pytest.fixture
def project(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create an empty project directory."""
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def widget_cache(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a source cache holding three semver tags of the widget root."""
    cache = tmp_path / "cache"
    write_source(cache, ROOT, [{"name": "1.0.0"}, {"name": "1.1.0"}, {"name": "2.0.0"}])
    return cache
