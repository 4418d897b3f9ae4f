"""
App exporter — publish the installed application's launcher on the host.
"""

from __future__ import annotations

import logging

from boxinstaller.adapters.containers.distrobox import DistroboxAdapter
from boxinstaller.core.models.config import InstallerConfig
from boxinstaller.core.models.result import CommandResult

logger = logging.getLogger(__name__)


def export_app(
    adapter: DistroboxAdapter,
    sandbox: str,
    app_id: str,
    timeout: int | None = None,
) -> CommandResult:
    """Run ``distrobox-export --app`` inside the sandbox."""
    result = adapter.export_app(sandbox, app_id, timeout=timeout)
    if not result.ok:
        logger.warning("Export of %s from %s failed: %s", app_id, sandbox, result.error)
    return result


def launch_instructions(
    config: InstallerConfig,
    reload_file: str | None = None,
) -> list[str]:
    """Lines telling the user how to start the application.

    Args:
        config: Installer configuration.
        reload_file: Startup file to ``source`` when a PATH entry was
            added during this run; None when no reload is needed.
    """
    app = config.app
    lines = [
        f"{app.label} is now available in your system's application menu",
        "",
        f"To launch {app.menu_name} you can:",
        f"  1. Search for '{app.menu_name}' in the application menu",
        f"  2. Run: {config.sandbox.tool} enter {config.sandbox.name} -- {app.id}",
    ]
    if reload_file:
        lines.append("")
        lines.append(f"You may need to reload your shell configuration: source {reload_file}")
    return lines
