"""
Install models — progress steps, fallback results, verification report.

These are process-lifetime values only. Nothing here is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal


@dataclass(frozen=True)
class InstallStep:
    """One numbered step of the run, for progress reporting."""

    name: str
    index: int
    total: int

    @property
    def label(self) -> str:
        return f"[{self.index}/{self.total}] {self.name}"


@dataclass
class StrategyResult:
    """Outcome of one fallback strategy.

    ``skipped`` means the strategy did not apply (e.g. no AUR on apt);
    ``failed`` means it applied and did not work. Either way the chain
    moves on to the next strategy.
    """

    strategy: str
    status: Literal["ok", "skipped", "failed"] = "ok"
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @classmethod
    def success(cls, strategy: str, detail: str = "") -> StrategyResult:
        return cls(strategy=strategy, status="ok", detail=detail)

    @classmethod
    def skip(cls, strategy: str, detail: str = "") -> StrategyResult:
        return cls(strategy=strategy, status="skipped", detail=detail)

    @classmethod
    def failure(cls, strategy: str, detail: str = "") -> StrategyResult:
        return cls(strategy=strategy, status="failed", detail=detail)


@dataclass
class CheckResult:
    """Result of a single post-install check."""

    name: str
    passed: bool
    message: str = ""
    advisory: bool = False  # advisory checks warn, never count as failures

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "passed": self.passed,
            "message": self.message,
            "advisory": self.advisory,
        }


@dataclass
class VerificationReport:
    """Aggregate of every post-install check, in evaluation order."""

    checks: list[CheckResult] = field(default_factory=list)

    def add(self, check: CheckResult) -> None:
        self.checks.append(check)

    @property
    def failures(self) -> int:
        return sum(1 for c in self.checks if not c.passed and not c.advisory)

    @property
    def warnings(self) -> int:
        return sum(1 for c in self.checks if not c.passed and c.advisory)

    @property
    def ok(self) -> bool:
        return self.failures == 0

    def get(self, name: str) -> CheckResult | None:
        for check in self.checks:
            if check.name == name:
                return check
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "failures": self.failures,
            "warnings": self.warnings,
            "checks": [c.to_dict() for c in self.checks],
        }
