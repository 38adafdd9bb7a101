"""YAML manifest and lock loader.

A project declares its own dependencies in ``depsweep.yaml``::

    requires:
      example.com/lib/log: "^1.2.0"
      example.com/lib/fmt: {branch: main}

and optionally records a previously resolved state in ``depsweep.lock``::

    pins:
      example.com/lib/log: v1.4.2
      example.com/lib/fmt: main
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from depsweep.core.versions import Constraint, constraint_from_spec
from depsweep.exceptions import DepSweepError, ManifestError
from depsweep.sources.base import ManifestLoader, ProjectManifest

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "depsweep.yaml"
LOCK_FILENAME = "depsweep.lock"


def _load_mapping(path: Path, key: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ManifestError(f"Malformed YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ManifestError(f"{path} must contain a mapping")
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ManifestError(f"'{key}' in {path} must be a mapping")
    return section


class YamlManifestLoader(ManifestLoader):
    """Loads ``depsweep.yaml`` and ``depsweep.lock`` from a project root."""

    def load(self, project_dir: Path) -> ProjectManifest | None:
        manifest_path = project_dir / MANIFEST_FILENAME
        lock_path = project_dir / LOCK_FILENAME
        if not manifest_path.is_file() and not lock_path.is_file():
            logger.debug("No manifest or lock in %s", project_dir)
            return None

        requirements: dict[str, Constraint] = {}
        if manifest_path.is_file():
            for root, spec in _load_mapping(manifest_path, "requires").items():
                try:
                    requirements[str(root)] = constraint_from_spec(spec)
                except DepSweepError as exc:
                    raise ManifestError(
                        f"Bad constraint on {root} in {manifest_path}: {exc}"
                    ) from exc

        lock: dict[str, str] = {}
        if lock_path.is_file():
            lock = {
                str(root): str(name)
                for root, name in _load_mapping(lock_path, "pins").items()
            }

        return ProjectManifest(
            requirements=MappingProxyType(requirements),
            lock=MappingProxyType(lock),
        )
