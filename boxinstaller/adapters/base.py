"""
Runner base — the protocol contract between services and external tools.

Services never call ``subprocess`` themselves.  They hand an argv list to
a Runner and get a CommandResult back, which makes every external call
observable in tests (``MockRunner``) and keeps error handling in one place.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from boxinstaller.core.models.result import CommandResult


class Runner(ABC):
    """Abstract base class for command runners.

    Runners NEVER raise for command failures — non-zero exits,
    timeouts and missing executables are captured in the result.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'subprocess', 'mock')."""

    @abstractmethod
    def run(
        self,
        cmd: list[str],
        *,
        env_overrides: dict[str, str] | None = None,
        timeout: int | None = None,
        capture: bool = True,
        cwd: str | None = None,
    ) -> CommandResult:
        """Run ``cmd`` to completion and return its result.

        Args:
            cmd: Argument vector; never passed through a shell.
            env_overrides: Variables layered over the inherited environment.
            timeout: Seconds before the command is killed. None blocks.
            capture: Capture stdout/stderr (True) or let the command write
                straight to the terminal (False, for long installs).
            cwd: Working directory for the command.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
