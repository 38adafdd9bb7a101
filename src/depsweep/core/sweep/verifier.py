"""Runs the verification command against a freshly materialized tree.

The command string is split on whitespace only. There is no quoting or
escaping, so an argument containing a space cannot be expressed; wrap such
commands in a script instead.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from depsweep.core.sweep.models import VerificationResult
from depsweep.core.versions import Version
from depsweep.exceptions import ExecError, VerifyError

logger = logging.getLogger(__name__)

VENDOR_ENV_VAR = "DEPSWEEP_VENDOR"


def split_command(command: str) -> list[str]:
    """Split *command* into an argument vector on runs of whitespace.

    >>> split_command("go  test ./...")
    ['go', 'test', './...']
    """
    return command.split()


class Verifier:
    """Runs one command per materialized version.

    Args:
        command: The verification command string.
        project_dir: Working directory for the command.
        vendor_dir: The materialized tree, exported as ``DEPSWEEP_VENDOR``.
        timeout: Seconds before the command is killed, or None to wait.
    """

    def __init__(
        self,
        command: str,
        project_dir: Path,
        vendor_dir: Path,
        timeout: float | None = None,
    ) -> None:
        self.argv = split_command(command)
        if not self.argv:
            raise ValueError("Verification command is empty")
        self.project_dir = project_dir
        self.vendor_dir = vendor_dir
        self.timeout = timeout

    def verify(self, version: Version) -> VerificationResult:
        """Run the command and capture its combined output.

        Never raises for command failures: non-zero exit, launch failure and
        timeout are all reported through the returned result.
        """
        env = dict(os.environ)
        env[VENDOR_ENV_VAR] = str(self.vendor_dir)
        logger.debug("Running %s for %s", self.argv, version)
        try:
            proc = subprocess.run(
                self.argv,
                cwd=self.project_dir,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            output = _decode(exc.output)
            return VerificationResult(
                version, None, output,
                VerifyError(f"timed out after {self.timeout}s"),
            )
        except OSError as exc:
            return VerificationResult(
                version, None, "",
                ExecError(f"could not run {self.argv[0]}: {exc}"),
            )

        output = _decode(proc.stdout)
        if proc.returncode != 0:
            return VerificationResult(
                version, proc.returncode, output,
                VerifyError(f"exit status {proc.returncode}"),
            )
        return VerificationResult(version, 0, output)


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data
