"""
L0 Detection — Host environment probes.

Read-only checks of what exists on the context PATH and in the user
database.  No subprocesses, no side effects, never fail: ``unknown`` and
``other`` are valid answers the workflow handles downstream.
"""

from __future__ import annotations

import logging
import os
import pwd
from dataclasses import dataclass, field

from boxinstaller.core.context import HostContext
from boxinstaller.core.data.install_commands import _CONTAINER_RUNTIMES, _PM_PROBES
from boxinstaller.core.models.host import HostEnvironment, PackageManagerKind, ShellKind

logger = logging.getLogger(__name__)


def detect_package_manager(ctx: HostContext) -> PackageManagerKind:
    """Return the first known package manager found on PATH."""
    for kind, executable in _PM_PROBES:
        if ctx.has(executable):
            logger.debug("Package manager: %s (%s)", kind.value, executable)
            return kind
    return PackageManagerKind.UNKNOWN


def _login_shell(ctx: HostContext) -> str:
    """The user's configured shell path: $SHELL, else the passwd entry."""
    shell = ctx.environ.get("SHELL", "")
    if shell:
        return shell

    try:
        if ctx.user:
            return pwd.getpwnam(ctx.user).pw_shell
        return pwd.getpwuid(os.getuid()).pw_shell
    except KeyError:
        logger.debug("No passwd entry for user %r", ctx.user)
        return ""


def detect_shell(ctx: HostContext) -> ShellKind:
    """Map the user's login shell to a ShellKind (``other`` if unknown)."""
    shell_path = _login_shell(ctx)
    if not shell_path:
        return ShellKind.OTHER
    return ShellKind.from_name(os.path.basename(shell_path))


def detect_container_runtime(ctx: HostContext) -> str | None:
    """Return ``podman`` or ``docker`` (in that preference), or None."""
    for runtime in _CONTAINER_RUNTIMES:
        if ctx.has(runtime):
            return runtime
    return None


def probe_host(ctx: HostContext) -> HostEnvironment:
    """Snapshot the host once; the result is read-only for the run."""
    host = HostEnvironment(
        shell=detect_shell(ctx),
        package_manager=detect_package_manager(ctx),
        shell_path=_login_shell(ctx),
        container_runtime=detect_container_runtime(ctx),
        has_curl=ctx.has("curl"),
        has_wget=ctx.has("wget"),
        has_bash=ctx.has("bash"),
    )
    logger.info(
        "Host: pm=%s shell=%s runtime=%s",
        host.package_manager.value, host.shell.value, host.container_runtime,
    )
    return host


@dataclass
class PrerequisiteReport:
    """Outcome of the prerequisite check."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    info: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
        }


def check_prerequisites(host: HostEnvironment) -> PrerequisiteReport:
    """Check the host can run the workflow at all.

    Fatal: no bash (the install script needs it) or neither curl nor
    wget.  A missing container runtime is only a warning — one is
    installed together with the container tool.
    """
    report = PrerequisiteReport()

    if not host.has_bash:
        report.errors.append("bash is not installed. It is required to run the install steps.")

    report.info.append(f"Detected shell: {host.shell.value}")
    report.info.append(f"Package manager: {host.package_manager.value}")
    if host.container_runtime:
        report.info.append(f"Container runtime: {host.container_runtime}")
    else:
        report.warnings.append(
            "Neither podman nor docker found. "
            "Will attempt to install podman with distrobox."
        )

    if not host.has_fetch_tool:
        report.errors.append(
            "Neither curl nor wget found. At least one is required for installation."
        )
    return report
