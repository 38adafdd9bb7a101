"""depsweep: Test a project across every acceptable version of a dependency."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
