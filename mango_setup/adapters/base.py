"""
Runner base — the contract between installer services and the OS.

Services never call ``subprocess`` or ``shutil.which`` directly. They
go through a CommandRunner, which lets the whole install be driven by
a recording mock in tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from mango_setup.core.models.receipt import Receipt


class CommandRunner(ABC):
    """Abstract base class for command runners.

    Runners perform external side effects and return receipts.
    They NEVER raise for a failing command; failures are captured
    in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g. 'shell', 'mock')."""

    @abstractmethod
    def which(self, program: str) -> str | None:
        """Resolve a program on PATH, or None if it is not installed."""

    @abstractmethod
    def run(
        self,
        command: Sequence[str],
        *,
        privileged: bool = False,
        cwd: str | None = None,
        capture: bool = False,
    ) -> Receipt:
        """Run a command to completion and return its receipt.

        Args:
            command: Argument vector, never a shell string.
            privileged: Run with elevated privileges when available.
            cwd: Working directory for the command.
            capture: Capture stdout/stderr instead of passing them
                through to the terminal (used for queries).
        """

    def command_exists(self, program: str) -> bool:
        return self.which(program) is not None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
