"""Derive a project's own import path from its location in the workspace.

Projects are expected under ``<workspace>/src/<import path>``, so a project
at ``~/workspace/src/example.com/team/app`` has the import root
``example.com/team/app``.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def derive_import_root(project_dir: Path, workspace: Path) -> str:
    """Return the slash-separated import root of *project_dir*.

    Falls back to the directory name when the project does
    not live under ``<workspace>/src``.
    """
    project = project_dir.expanduser().resolve()
    src = (workspace.expanduser() / "src").resolve()
    try:
        rel = project.relative_to(src)
    except ValueError:
        logger.info(
            "%s is not under %s; using %r as its import root",
            project, src, project.name,
        )
        return project.name
    if not rel.parts:
        return project.name
    return rel.as_posix()
