"""
Subprocess runner — the SINGLE PLACE where ``subprocess.run`` is called.

All timeouts, environment layering, logging and error capture for
external commands (package manager, distrobox, curl) live here.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time

from boxinstaller.adapters.base import Runner
from boxinstaller.core.models.result import CommandResult

logger = logging.getLogger(__name__)

# Keep captured output bounded in results and logs
_OUTPUT_TAIL = 2000


class SubprocessRunner(Runner):
    """Run commands as blocking child processes."""

    @property
    def name(self) -> str:
        return "subprocess"

    def run(
        self,
        cmd: list[str],
        *,
        env_overrides: dict[str, str] | None = None,
        timeout: int | None = None,
        capture: bool = True,
        cwd: str | None = None,
    ) -> CommandResult:
        env = os.environ.copy()
        if env_overrides:
            env.update(env_overrides)

        logger.debug("Executing: %s (timeout=%s)", cmd, timeout)
        start = time.monotonic()

        try:
            result = subprocess.run(
                cmd,
                capture_output=capture,
                text=True,
                timeout=timeout,
                env=env,
                cwd=cwd,
            )
        except subprocess.TimeoutExpired:
            return CommandResult.failure(
                command=cmd,
                error=f"Command timed out after {timeout}s",
                return_code=None,
                duration_ms=_elapsed_ms(start),
            )
        except FileNotFoundError:
            return CommandResult.failure(
                command=cmd,
                error=f"Executable not found: {cmd[0]}",
                return_code=127,
            )
        except OSError as e:
            logger.exception("Subprocess error: %s", cmd)
            return CommandResult.failure(command=cmd, error=f"Command execution error: {e}")

        elapsed_ms = _elapsed_ms(start)
        stdout = (result.stdout or "")[-_OUTPUT_TAIL:]
        stderr = (result.stderr or "")[-_OUTPUT_TAIL:]

        if result.returncode == 0:
            logger.debug("Command ok in %dms: %s", elapsed_ms, cmd[0])
            return CommandResult.success(
                command=cmd,
                stdout=stdout,
                stderr=stderr,
                duration_ms=elapsed_ms,
            )

        logger.info("Command failed (exit %d): %s", result.returncode, " ".join(cmd))
        return CommandResult.failure(
            command=cmd,
            error=stderr.strip() or f"Command exited with code {result.returncode}",
            return_code=result.returncode,
            stdout=stdout,
            stderr=stderr,
            duration_ms=elapsed_ms,
        )


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
