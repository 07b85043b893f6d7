"""
Receipt model — the execution contract for external commands.

Every process the installer spawns comes back as a Receipt. Runners
NEVER raise for a failing command: a non-zero exit, a missing binary
or an OS error are all captured here, and the caller decides whether
the failure is fatal or just means "try the next fallback".
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of running one external command."""

    command: list[str] = Field(default_factory=list)
    status: Literal["ok", "failed"] = "ok"
    privileged: bool = False

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    return_code: int | None = None
    stdout: str = ""
    stderr: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command failed for any reason."""
        return self.status == "failed"

    @property
    def display(self) -> str:
        """The command as a single printable line."""
        return " ".join(self.command)

    @classmethod
    def success(cls, command: list[str], **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        kwargs.setdefault("return_code", 0)
        return cls(command=list(command), status="ok", **kwargs)

    @classmethod
    def failure(cls, command: list[str], error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(command=list(command), status="failed", error=error, **kwargs)
