"""
Sandbox provisioner — make sure distrobox and the named sandbox exist.

``ensure_container_tool`` installs the container tool through the host
package manager, or through the upstream universal installer when the
package manager is unknown.  ``ensure_sandbox`` applies the
create / reuse / recreate policy to the one named sandbox.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from collections.abc import Callable
from typing import Any

from boxinstaller.adapters.base import Runner
from boxinstaller.adapters.containers.distrobox import DistroboxAdapter
from boxinstaller.core.context import HostContext
from boxinstaller.core.data.install_commands import (
    _BACKEND_GUIDANCE,
    _CONTAINER_RUNTIMES,
    _TOOL_INSTALL,
)
from boxinstaller.core.models.config import InstallerConfig
from boxinstaller.core.models.host import HostEnvironment, PackageManagerKind
from boxinstaller.core.models.sandbox import SandboxDecision
from boxinstaller.core.services.shell_profile import ensure_path_entry

logger = logging.getLogger(__name__)


# ── Container tool ──────────────────────────────────────────────


def tool_install_commands(
    package_manager: PackageManagerKind,
    config: InstallerConfig,
    as_root: bool = False,
) -> list[list[str]]:
    """Argv commands that install the tool and its backend, in order.

    Returns an empty list for ``unknown`` (no package-manager recipe).
    """
    recipe = _TOOL_INSTALL.get(package_manager, [])
    fill = {"{tool}": config.sandbox.tool, "{backend}": config.tool.backend}
    commands = []
    for template in recipe:
        cmd = [fill.get(arg, arg) for arg in template]
        commands.append(cmd if as_root else ["sudo", *cmd])
    return commands


def ensure_container_tool(
    host: HostEnvironment,
    ctx: HostContext,
    runner: Runner,
    config: InstallerConfig,
    on_notice: Callable[[str], None] | None = None,
) -> dict[str, Any]:
    """Install the container tool if it is not on PATH.

    ``on_notice(message)`` is called as soon as a user-facing notice
    arises; the same notices are returned under ``"notices"``.

    Returns::

        {"ok": True, "installed": False, "method": "present"}
        {"ok": True, "installed": True, "method": "apt"}
        {"ok": True, "installed": True, "method": "universal",
         "path_entry": {...}, "notices": [...]}
        or
        {"ok": False, "error": "...", "guidance": [...]}
    """
    tool = config.sandbox.tool
    if ctx.has(tool):
        logger.info("%s already installed at %s", tool, ctx.which(tool))
        return {"ok": True, "installed": False, "method": "present"}

    if host.package_manager is PackageManagerKind.UNKNOWN:
        result = _universal_install(host, ctx, runner, config, on_notice)
        if not result["ok"]:
            return result
    else:
        result = {"ok": True, "method": host.package_manager.value, "notices": []}
        for cmd in tool_install_commands(host.package_manager, config, as_root=ctx.is_root):
            r = runner.run(
                cmd,
                env_overrides=ctx.env_overrides(),
                timeout=config.timeouts.tool_install,
                capture=False,
            )
            if not r.ok:
                return {
                    "ok": False,
                    "method": host.package_manager.value,
                    "error": f"{tool} installation failed: {r.display} ({r.error})",
                }

    if not ctx.has(tool):
        return {
            "ok": False,
            "method": result["method"],
            "error": f"{tool} installation failed: '{tool}' is still not on PATH",
        }

    result["installed"] = True
    logger.info("%s installed via %s", tool, result["method"])
    return result


def _universal_install(
    host: HostEnvironment,
    ctx: HostContext,
    runner: Runner,
    config: InstallerConfig,
    on_notice: Callable[[str], None] | None = None,
) -> dict[str, Any]:
    """Install into a user-local prefix with the upstream install script."""
    tool = config.sandbox.tool
    notices: list[str] = []

    def notice(message: str) -> None:
        notices.append(message)
        if on_notice:
            on_notice(message)

    notice("Package manager not recognized. Attempting installation with curl...")

    if not host.has_curl:
        return {
            "ok": False,
            "method": "universal",
            "error": "curl is required for universal installation but not found.",
            "notices": notices,
        }

    prefix = ctx.expand(config.tool.prefix)
    dl = _download_installer(
        runner,
        ctx,
        config.tool.installer_url,
        expected_sha256=config.tool.installer_sha256,
        timeout=config.timeouts.tool_install,
    )
    if not dl["ok"]:
        return {"ok": False, "method": "universal", "error": dl["error"], "notices": notices}

    try:
        r = runner.run(
            ["sh", dl["path"], "--prefix", str(prefix)],
            env_overrides=ctx.env_overrides(),
            timeout=config.timeouts.tool_install,
            capture=False,
        )
    finally:
        _cleanup(dl["path"])

    if not r.ok:
        return {
            "ok": False,
            "method": "universal",
            "error": f"{tool} universal installer failed ({r.error})",
            "notices": notices,
        }

    path_entry = ensure_path_entry(str(prefix / "bin"), host.shell, ctx)
    if not path_entry["ok"]:
        return {"ok": False, "method": "universal", "error": path_entry["error"], "notices": notices}
    notice(path_entry["notice"])

    if not any(ctx.has(runtime) for runtime in _CONTAINER_RUNTIMES):
        return {
            "ok": False,
            "method": "universal",
            "error": "Neither podman nor docker are installed. Please install one of them manually.",
            "guidance": list(_BACKEND_GUIDANCE),
            "path_entry": path_entry,
            "notices": notices,
        }

    return {
        "ok": True,
        "method": "universal",
        "path_entry": path_entry,
        "notices": notices,
    }


def _download_installer(
    runner: Runner,
    ctx: HostContext,
    url: str,
    expected_sha256: str | None = None,
    timeout: int | None = None,
) -> dict[str, Any]:
    """Download the install script to a tempfile, verifying SHA256 if given.

    The caller owns the returned path and must remove it.
    """
    fd, path = tempfile.mkstemp(suffix=".sh", prefix="boxinstaller_tool_")
    os.close(fd)

    r = runner.run(
        ["curl", "-fsSL", url, "-o", path],
        env_overrides=ctx.env_overrides(),
        timeout=timeout,
    )
    if not r.ok:
        _cleanup(path)
        return {"ok": False, "error": f"Download failed: {url} ({r.error})"}

    if expected_sha256:
        expected = expected_sha256.removeprefix("sha256:").lower()
        try:
            with open(path, "rb") as f:
                actual = hashlib.sha256(f.read()).hexdigest()
        except OSError as e:
            _cleanup(path)
            return {"ok": False, "error": f"Cannot read downloaded installer: {e}"}
        if actual != expected:
            _cleanup(path)
            return {
                "ok": False,
                "error": (
                    f"SHA256 mismatch for {url}\n"
                    f"Expected: {expected}\n"
                    f"Got:      {actual}"
                ),
            }
    else:
        logger.warning("Running %s without checksum verification", url)

    os.chmod(path, 0o700)
    return {"ok": True, "path": path}


def _cleanup(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


# ── Sandbox ─────────────────────────────────────────────────────


def ensure_sandbox(
    adapter: DistroboxAdapter,
    name: str,
    image: str,
    confirm_recreate: Callable[[str], bool] | None = None,
    *,
    query_timeout: int | None = None,
    timeout: int | None = None,
) -> dict[str, Any]:
    """Create, reuse or recreate the named sandbox.

    Args:
        adapter: Container-tool adapter.
        name: Sandbox name.
        image: Base image for creation.
        confirm_recreate: Asked ``confirm_recreate(name)`` when the sandbox
            exists; True removes and recreates it.  None means reuse
            without asking.

    Returns::

        {"ok": True, "decision": SandboxDecision.CREATE}
        or
        {"ok": False, "decision": ..., "error": "Sandbox creation failed: ..."}
    """
    listing = adapter.exists(name, timeout=query_timeout)
    if not listing.ok:
        return {
            "ok": False,
            "decision": None,
            "error": f"Cannot list sandboxes: {listing.error}",
        }

    decision = SandboxDecision.CREATE
    if listing.metadata.get("exists"):
        recreate = confirm_recreate(name) if confirm_recreate else False
        if not recreate:
            logger.info("Reusing existing sandbox %s", name)
            return {"ok": True, "decision": SandboxDecision.REUSE}

        decision = SandboxDecision.RECREATE
        removed = adapter.remove(name, timeout=timeout)
        if not removed.ok:
            return {
                "ok": False,
                "decision": decision,
                "error": f"Sandbox removal failed: {removed.error}",
            }

    created = adapter.create(name, image, timeout=timeout)
    if not created.ok:
        return {
            "ok": False,
            "decision": decision,
            "error": f"Sandbox creation failed: {created.error}",
        }

    return {"ok": True, "decision": decision}
