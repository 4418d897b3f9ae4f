"""
Detect use case — read-only report of the host and the sandbox.

Backs ``boxinstaller detect`` and ``boxinstaller sandbox status``.
Never installs, creates or removes anything.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from boxinstaller.adapters.base import Runner
from boxinstaller.adapters.containers.distrobox import DistroboxAdapter
from boxinstaller.core.context import HostContext
from boxinstaller.core.models.config import InstallerConfig
from boxinstaller.core.models.host import HostEnvironment
from boxinstaller.core.models.sandbox import SandboxEnvironment
from boxinstaller.core.services.host_probe import (
    PrerequisiteReport,
    check_prerequisites,
    probe_host,
)
from boxinstaller.core.services.shell_profile import config_file_for

_VERSION_RE = re.compile(r"\d+\.\d+(?:\.\d+)?")


@dataclass
class DetectResult:
    """What the installer would be working with."""

    host: HostEnvironment | None = None
    prerequisites: PrerequisiteReport | None = None
    shell_config_file: str = ""
    tool: str = "distrobox"
    tool_path: str | None = None
    versions: dict[str, str] = field(default_factory=dict)
    sandbox: SandboxEnvironment | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {}
        if self.host:
            result["host"] = self.host.to_dict()
        if self.prerequisites:
            result["prerequisites"] = self.prerequisites.to_dict()
        result["shell_config_file"] = self.shell_config_file
        result["tool"] = {
            "name": self.tool,
            "available": self.tool_path is not None,
            "path": self.tool_path,
        }
        result["versions"] = self.versions
        if self.sandbox:
            result["sandbox"] = self.sandbox.to_dict()
        if self.error:
            result["error"] = self.error
        return result


def _version_of(runner: Runner, ctx: HostContext, cmd: list[str]) -> str | None:
    r = runner.run(cmd, env_overrides=ctx.env_overrides(), timeout=10)
    if not r.ok:
        return None
    m = _VERSION_RE.search(r.stdout)
    return m.group(0) if m else None


def sandbox_status(
    config: InstallerConfig,
    ctx: HostContext,
    runner: Runner,
) -> tuple[SandboxEnvironment, str | None]:
    """Look up the configured sandbox.

    Returns:
        (sandbox, error) — error is set when the listing itself failed
        or the container tool is missing.
    """
    sandbox = SandboxEnvironment(name=config.sandbox.name, base_image=config.sandbox.image)
    adapter = DistroboxAdapter(runner, ctx, executable=config.sandbox.tool)
    if not adapter.is_available():
        return sandbox, f"{config.sandbox.tool} is not installed"

    listing = adapter.exists(sandbox.name, timeout=config.timeouts.query)
    if not listing.ok:
        return sandbox, f"Cannot list sandboxes: {listing.error}"
    sandbox.exists = bool(listing.metadata.get("exists"))
    return sandbox, None


def run_detect(
    config: InstallerConfig,
    ctx: HostContext,
    runner: Runner,
) -> DetectResult:
    """Probe the host, check prerequisites and look up the sandbox."""
    host = probe_host(ctx)
    result = DetectResult(
        host=host,
        prerequisites=check_prerequisites(host),
        shell_config_file=str(config_file_for(host.shell, ctx.home)),
        tool=config.sandbox.tool,
        tool_path=ctx.which(config.sandbox.tool),
    )

    if host.has_bash:
        version = _version_of(runner, ctx, ["bash", "--version"])
        if version:
            result.versions["bash"] = version
    if host.container_runtime:
        version = _version_of(runner, ctx, [host.container_runtime, "--version"])
        if version:
            result.versions[host.container_runtime] = version

    if result.tool_path:
        version = _version_of(runner, ctx, [config.sandbox.tool, "version"])
        if version:
            result.versions[config.sandbox.tool] = version

    result.sandbox, result.error = sandbox_status(config, ctx, runner)
    return result
