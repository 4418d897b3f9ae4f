"""
Mock runner — universal test double for external commands.

Records every command it receives and answers from a table of canned
responses keyed by command prefix.  Anything without a canned response
succeeds with empty output.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from boxinstaller.adapters.base import Runner
from boxinstaller.core.models.result import CommandResult


@dataclass
class MockCall:
    """One recorded invocation."""

    cmd: list[str]
    env_overrides: dict[str, str] = field(default_factory=dict)
    timeout: int | None = None
    capture: bool = True


@dataclass
class _Canned:
    status: str = "ok"
    stdout: str = ""
    error: str = ""
    return_code: int = 0
    side_effect: Callable[[list[str]], None] | None = None


class MockRunner(Runner):
    """Recording runner for tests.

    Responses match on the longest registered prefix of the argv list,
    so ``("distrobox", "list")`` answers every ``distrobox list ...`` call.
    """

    def __init__(self, runner_name: str = "mock"):
        self._name = runner_name
        self._responses: dict[tuple[str, ...], _Canned] = {}
        self._call_log: list[MockCall] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[MockCall]:
        """All invocations this mock has received."""
        return self._call_log

    @property
    def commands(self) -> list[list[str]]:
        """Just the argv lists, in call order."""
        return [call.cmd for call in self._call_log]

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_output(
        self,
        prefix: tuple[str, ...],
        stdout: str,
        side_effect: Callable[[list[str]], None] | None = None,
    ) -> None:
        """Configure a successful response with the given stdout."""
        self._responses[tuple(prefix)] = _Canned(stdout=stdout, side_effect=side_effect)

    def set_failure(
        self,
        prefix: tuple[str, ...],
        error: str = "Mock failure",
        return_code: int = 1,
        side_effect: Callable[[list[str]], None] | None = None,
    ) -> None:
        """Configure commands starting with ``prefix`` to fail."""
        self._responses[tuple(prefix)] = _Canned(
            status="failed",
            error=error,
            return_code=return_code,
            side_effect=side_effect,
        )

    def on_call(
        self,
        prefix: tuple[str, ...],
        side_effect: Callable[[list[str]], None],
    ) -> None:
        """Run ``side_effect(cmd)`` when a matching command succeeds."""
        self._responses[tuple(prefix)] = _Canned(side_effect=side_effect)

    def ran(self, *prefix: str) -> bool:
        """Whether any recorded command starts with ``prefix``."""
        return any(tuple(cmd[: len(prefix)]) == prefix for cmd in self.commands)

    def run(
        self,
        cmd: list[str],
        *,
        env_overrides: dict[str, str] | None = None,
        timeout: int | None = None,
        capture: bool = True,
        cwd: str | None = None,
    ) -> CommandResult:
        self._call_log.append(
            MockCall(
                cmd=list(cmd),
                env_overrides=dict(env_overrides or {}),
                timeout=timeout,
                capture=capture,
            )
        )

        canned = self._match(cmd)
        if canned is None:
            return CommandResult.success(command=cmd, metadata={"mock": True})

        if canned.side_effect:
            canned.side_effect(list(cmd))

        if canned.status == "failed":
            return CommandResult.failure(
                command=cmd,
                error=canned.error,
                return_code=canned.return_code,
                metadata={"mock": True},
            )
        return CommandResult.success(
            command=cmd,
            stdout=canned.stdout,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and canned responses."""
        self._call_log.clear()
        self._responses.clear()

    def _match(self, cmd: list[str]) -> _Canned | None:
        best: tuple[str, ...] | None = None
        for prefix in self._responses:
            if tuple(cmd[: len(prefix)]) == prefix:
                if best is None or len(prefix) > len(best):
                    best = prefix
        return self._responses[best] if best is not None else None
