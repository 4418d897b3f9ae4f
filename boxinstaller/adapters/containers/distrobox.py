"""
Distrobox adapter — sandbox lifecycle through the distrobox CLI.

Provides list / create / rm / enter / export as CommandResults.
Uses the distrobox CLI only — never podman or docker directly.
"""

from __future__ import annotations

import logging

from boxinstaller.adapters.base import Runner
from boxinstaller.core.context import HostContext
from boxinstaller.core.models.result import CommandResult

logger = logging.getLogger(__name__)


def listing_has_sandbox(listing: str, name: str) -> bool:
    """Check a ``distrobox list`` output for ``name``.

    Table rows (``ID | NAME | STATUS | IMAGE``) match only when the NAME
    column equals ``name``; the header row is skipped.  Lines that are not
    table rows match when they start with ``name``.  Substrings, IDs and
    images never match.
    """
    for line in listing.splitlines():
        if "|" not in line:
            if line.startswith(name):
                return True
            continue
        columns = [col.strip() for col in line.split("|")]
        if columns[0] == "ID" and columns[1:2] == ["NAME"]:
            continue
        if len(columns) >= 2 and columns[1] == name:
            return True
    return False


class DistroboxAdapter:
    """Container-tool operations on a single named sandbox.

    Every method returns a CommandResult and never raises.
    """

    def __init__(
        self,
        runner: Runner,
        context: HostContext,
        executable: str = "distrobox",
    ):
        self.runner = runner
        self.context = context
        self.executable = executable

    def is_available(self) -> bool:
        return self.context.has(self.executable)

    # ── Queries ─────────────────────────────────────────────────

    def list_sandboxes(self, timeout: int | None = None) -> CommandResult:
        return self._distrobox(["list", "--no-color"], timeout=timeout)

    def exists(self, name: str, timeout: int | None = None) -> CommandResult:
        """List sandboxes; ``metadata["exists"]`` tells whether ``name`` is one."""
        result = self.list_sandboxes(timeout=timeout)
        if result.ok:
            result.metadata["exists"] = listing_has_sandbox(result.stdout, name)
        return result

    # ── Lifecycle ───────────────────────────────────────────────

    def create(self, name: str, image: str, timeout: int | None = None) -> CommandResult:
        logger.info("Creating sandbox %s from %s", name, image)
        return self._distrobox(
            ["create", "--name", name, "--image", image, "--yes"],
            timeout=timeout,
            capture=False,
        )

    def remove(self, name: str, timeout: int | None = None) -> CommandResult:
        logger.info("Removing sandbox %s", name)
        return self._distrobox(["rm", "-f", name], timeout=timeout)

    def enter(
        self,
        name: str,
        command: list[str],
        timeout: int | None = None,
        capture: bool = False,
    ) -> CommandResult:
        """Run ``command`` inside the sandbox and return its exit status."""
        return self._distrobox(
            ["enter", name, "--", *command],
            timeout=timeout,
            capture=capture,
        )

    def export_app(self, name: str, app_id: str, timeout: int | None = None) -> CommandResult:
        """Surface ``app_id``'s desktop entry on the host."""
        logger.info("Exporting %s from %s", app_id, name)
        return self.enter(
            name,
            ["distrobox-export", "--app", app_id],
            timeout=timeout,
            capture=True,
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _distrobox(
        self,
        args: list[str],
        timeout: int | None = None,
        capture: bool = True,
    ) -> CommandResult:
        return self.runner.run(
            [self.executable, *args],
            env_overrides=self.context.env_overrides(),
            timeout=timeout,
            capture=capture,
        )
