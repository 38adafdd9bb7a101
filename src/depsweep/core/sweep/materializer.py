"""Writes solved dependency sets to disk and removes them again."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from depsweep.core.sweep.models import SolveOutcome
from depsweep.exceptions import WriteError
from depsweep.sources.base import Resolver

logger = logging.getLogger(__name__)


class TreeMaterializer:
    """Materializes solutions through the resolver's export capability.

    Args:
        resolver: Resolver whose ``export`` writes the trees.
    """

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver

    def write(self, outcome: SolveOutcome, vendor_dir: Path) -> None:
        """Write the solution of a successful *outcome* into *vendor_dir*.

        No retries. A partially written tree is left for ``remove``.

        Raises:
            WriteError: If the export fails for any reason.
        """
        if outcome.solution is None:
            raise ValueError(f"Cannot write {outcome.version}: it has no solution")
        try:
            self._resolver.export(outcome.solution, vendor_dir)
        except WriteError:
            raise
        except Exception as exc:
            raise WriteError(f"could not write tree: {exc}") from exc
        logger.debug("Wrote %d projects to %s", len(outcome.solution), vendor_dir)

    @staticmethod
    def remove(vendor_dir: Path) -> None:
        """Delete a transient vendor tree if present."""
        if not os.path.lexists(vendor_dir):
            return
        if os.path.isdir(vendor_dir) and not os.path.islink(vendor_dir):
            shutil.rmtree(vendor_dir)
        else:
            os.unlink(vendor_dir)
