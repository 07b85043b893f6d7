"""
Mock runner — recording test double for every external command.

Returns success for everything by default. Individual commands can be
made to fail, or to return canned output, by matching on a command
prefix. Program lookups answer from a configurable set of "installed"
binaries.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

from mango_setup.adapters.base import CommandRunner
from mango_setup.core.models.receipt import Receipt


@dataclass
class RecordedCall:
    """One command the mock was asked to run."""

    command: list[str]
    privileged: bool = False
    cwd: str | None = None
    capture: bool = False

    @property
    def line(self) -> str:
        return " ".join(self.command)


class MockRunner(CommandRunner):
    """Universal mock runner for testing."""

    def __init__(
        self,
        available: Iterable[str] = (),
        runner_name: str = "mock",
    ):
        self._name = runner_name
        self._available: set[str] = set(available)
        self._responses: dict[str, Receipt] = {}
        self._hooks: dict[str, Callable[[RecordedCall], None]] = {}
        self._call_log: list[RecordedCall] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[RecordedCall]:
        """Every command this mock has received, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    @property
    def lines(self) -> list[str]:
        """The recorded commands as space-joined strings."""
        return [c.line for c in self._call_log]

    def make_available(self, *programs: str) -> None:
        self._available.update(programs)

    def make_unavailable(self, *programs: str) -> None:
        self._available.difference_update(programs)

    def which(self, program: str) -> str | None:
        if program in self._available:
            return f"/usr/bin/{program}"
        return None

    def set_response(self, prefix: str, receipt: Receipt) -> None:
        """Return ``receipt`` for any command starting with ``prefix``."""
        self._responses[prefix] = receipt

    def set_output(self, prefix: str, stdout: str) -> None:
        """Succeed with canned stdout for commands starting with ``prefix``."""
        self._responses[prefix] = Receipt.success([prefix], stdout=stdout)

    def set_failure(self, prefix: str, error: str = "Mock failure", return_code: int = 1) -> None:
        """Fail any command starting with ``prefix``."""
        self._responses[prefix] = Receipt.failure(
            [prefix], error=error, return_code=return_code
        )

    def on_run(self, prefix: str, hook: Callable[[RecordedCall], None]) -> None:
        """Call ``hook`` whenever a matching command runs (e.g. to fake side effects)."""
        self._hooks[prefix] = hook

    def called(self, prefix: str) -> bool:
        return any(line.startswith(prefix) for line in self.lines)

    def count(self, prefix: str) -> int:
        return sum(1 for line in self.lines if line.startswith(prefix))

    def _match(self, table: dict, line: str):
        best = None
        for prefix in table:
            if line.startswith(prefix) and (best is None or len(prefix) > len(best)):
                best = prefix
        return table[best] if best is not None else None

    def run(
        self,
        command: Sequence[str],
        *,
        privileged: bool = False,
        cwd: str | None = None,
        capture: bool = False,
    ) -> Receipt:
        call = RecordedCall(
            command=list(command), privileged=privileged, cwd=cwd, capture=capture
        )
        self._call_log.append(call)

        hook = self._match(self._hooks, call.line)
        if hook is not None:
            hook(call)

        canned = self._match(self._responses, call.line)
        if canned is not None:
            return canned.model_copy(
                update={"command": call.command, "privileged": privileged}
            )

        return Receipt.success(call.command, privileged=privileged)

    def reset(self) -> None:
        """Clear call log, responses and hooks."""
        self._call_log.clear()
        self._responses.clear()
        self._hooks.clear()
