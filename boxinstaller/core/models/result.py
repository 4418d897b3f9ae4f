"""
Command result model — the execution contract.

Every subprocess the installer spawns comes back as a CommandResult.
Runners never raise: failures (non-zero exit, timeout, missing binary)
are captured here and checked by the caller right after the call.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class CommandResult(BaseModel):
    """Outcome of one external command."""

    command: list[str] = Field(default_factory=list)
    status: Literal["ok", "failed"] = "ok"
    return_code: int | None = 0

    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    duration_ms: int = 0

    metadata: dict[str, Any] = Field(default_factory=dict)

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
    def success(
        cls,
        command: list[str],
        stdout: str = "",
        **kwargs: Any,
    ) -> CommandResult:
        """Create a success result."""
        return cls(command=command, status="ok", return_code=0, stdout=stdout, **kwargs)

    @classmethod
    def failure(
        cls,
        command: list[str],
        error: str,
        return_code: int | None = 1,
        **kwargs: Any,
    ) -> CommandResult:
        """Create a failure result."""
        return cls(
            command=command,
            status="failed",
            return_code=return_code,
            error=error,
            **kwargs,
        )
