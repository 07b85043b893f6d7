"""
Shell command runner — the single place processes are spawned.

Package-manager output is passed straight through to the terminal so
long installs stay visible; queries capture their output instead.
There is no timeout: a hanging tool blocks the run, exactly as it
would when invoked by hand.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from collections.abc import Sequence

from mango_setup.adapters.base import CommandRunner
from mango_setup.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


def _default_sudo_prefix() -> list[str]:
    """``["sudo"]`` when we are not root and sudo exists, else ``[]``."""
    if os.geteuid() == 0:
        return []
    if shutil.which("sudo"):
        return ["sudo"]
    return []


class ShellCommandRunner(CommandRunner):
    """Run commands with ``subprocess.run`` and capture the outcome.

    Privileged commands get the sudo prefix when one is available;
    otherwise they run unprivileged and fail on their own if they
    need root.
    """

    def __init__(self, sudo_prefix: Sequence[str] | None = None):
        self._sudo_prefix = (
            list(sudo_prefix) if sudo_prefix is not None else _default_sudo_prefix()
        )

    @property
    def name(self) -> str:
        return "shell"

    @property
    def sudo_prefix(self) -> list[str]:
        return list(self._sudo_prefix)

    def which(self, program: str) -> str | None:
        return shutil.which(program)

    def run(
        self,
        command: Sequence[str],
        *,
        privileged: bool = False,
        cwd: str | None = None,
        capture: bool = False,
    ) -> Receipt:
        argv = list(command)
        if privileged:
            argv = self._sudo_prefix + argv

        logger.debug("Executing: %s (cwd=%s)", " ".join(argv), cwd)
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=capture,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            return Receipt.failure(
                argv,
                error=f"Command not found: {argv[0]}",
                privileged=privileged,
            )
        except OSError as e:
            return Receipt.failure(
                argv,
                error=f"Command execution error: {e}",
                privileged=privileged,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "").strip()
        stderr = (result.stderr or "").strip()

        if result.returncode == 0:
            return Receipt.success(
                argv,
                privileged=privileged,
                duration_ms=elapsed_ms,
                stdout=stdout,
                stderr=stderr,
            )

        return Receipt.failure(
            argv,
            error=stderr or f"Command exited with code {result.returncode}",
            privileged=privileged,
            duration_ms=elapsed_ms,
            return_code=result.returncode,
            stdout=stdout,
            stderr=stderr,
        )
