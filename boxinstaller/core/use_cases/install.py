"""
Install use case — the full provisioning workflow.

This is the top-level orchestrator: it probes the host, checks
prerequisites, installs the container tool, applies the sandbox policy,
runs the install script inside the sandbox and exports the launcher.

    START → CHECK_PREREQS → ENSURE_TOOL → ENSURE_SANDBOX
          → RUN_INSTALL_SCRIPT → EXPORT_APP → SUCCEEDED

Any stage may end the run in FAILED; there are no retries and nothing
is rolled back except the temporary install script.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from boxinstaller.adapters.base import Runner
from boxinstaller.adapters.containers.distrobox import DistroboxAdapter
from boxinstaller.core.context import HostContext
from boxinstaller.core.models.config import InstallerConfig
from boxinstaller.core.models.host import HostEnvironment
from boxinstaller.core.models.sandbox import SandboxDecision
from boxinstaller.core.services.exporter import export_app, launch_instructions
from boxinstaller.core.services.host_probe import check_prerequisites, probe_host
from boxinstaller.core.services.install_script import install_script, run_install_script
from boxinstaller.core.services.provisioner import ensure_container_tool, ensure_sandbox

logger = logging.getLogger(__name__)


class WorkflowStage(str, Enum):
    START = "start"
    CHECK_PREREQS = "check_prereqs"
    ENSURE_TOOL = "ensure_tool"
    ENSURE_SANDBOX = "ensure_sandbox"
    RUN_INSTALL_SCRIPT = "run_install_script"
    EXPORT_APP = "export_app"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# (stage, level, message) — level is "info", "warning" or "error"
ProgressCallback = Callable[[WorkflowStage, str, str], None]


@dataclass
class InstallResult:
    """Result of one installer run."""

    stage: WorkflowStage = WorkflowStage.START
    stages: list[WorkflowStage] = field(default_factory=list)
    failed_stage: WorkflowStage | None = None
    host: HostEnvironment | None = None
    tool_method: str | None = None
    decision: SandboxDecision | None = None
    error: str | None = None
    guidance: list[str] = field(default_factory=list)
    notices: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    reload_file: str | None = None

    @property
    def ok(self) -> bool:
        return self.stage is WorkflowStage.SUCCEEDED

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        result: dict = {
            "ok": self.ok,
            "stage": self.stage.value,
            "stages": [s.value for s in self.stages],
        }
        if self.error:
            result["error"] = self.error
            result["failed_stage"] = self.failed_stage.value if self.failed_stage else None
            if self.guidance:
                result["guidance"] = self.guidance
        if self.host:
            result["host"] = self.host.to_dict()
        if self.tool_method:
            result["tool_method"] = self.tool_method
        if self.decision:
            result["sandbox_decision"] = self.decision.value
        if self.notices:
            result["notices"] = self.notices
        if self.instructions:
            result["instructions"] = self.instructions
        if self.reload_file:
            result["reload_file"] = self.reload_file
        return result


def run_install(
    config: InstallerConfig,
    ctx: HostContext,
    runner: Runner,
    *,
    confirm_recreate: Callable[[str], bool] | None = None,
    on_progress: ProgressCallback | None = None,
) -> InstallResult:
    """Run the provisioning workflow end to end.

    Args:
        config: Installer configuration.
        ctx: Host context; its PATH may grow during the run.
        runner: Executes every external command.
        confirm_recreate: Asked when the sandbox already exists. None
            reuses the existing sandbox without asking.
        on_progress: Optional callback ``(stage, level, message)`` for
            progress reporting.

    Returns:
        InstallResult; ``exit_code`` is 0 only when the app was exported.
    """
    result = InstallResult()
    timeouts = config.timeouts
    name = config.sandbox.name

    def emit(level: str, message: str) -> None:
        logger.info("%s [%s] %s", result.stage.value, level, message)
        if on_progress:
            on_progress(result.stage, level, message)

    def enter(stage: WorkflowStage) -> None:
        result.stage = stage
        result.stages.append(stage)

    def fail(error: str) -> InstallResult:
        result.failed_stage = result.stage
        result.error = error
        emit("error", error)
        enter(WorkflowStage.FAILED)
        return result

    enter(WorkflowStage.START)

    # ── Prerequisites ──────────────────────────────────────────
    enter(WorkflowStage.CHECK_PREREQS)
    emit("info", "Checking prerequisites...")
    host = probe_host(ctx)
    result.host = host
    report = check_prerequisites(host)
    for line in report.info:
        emit("info", line)
    for warning in report.warnings:
        emit("warning", warning)
    if not report.ok:
        for error in report.errors:
            emit("error", error)
        return fail("Prerequisites check failed. Please install missing components.")
    emit("info", "All prerequisites satisfied!")

    # ── Container tool ─────────────────────────────────────────
    enter(WorkflowStage.ENSURE_TOOL)
    tool = config.sandbox.tool
    if not ctx.has(tool):
        emit("warning", f"{tool} not found. Proceeding with installation...")
    def on_notice(message: str) -> None:
        result.notices.append(message)
        emit("warning", message)

    tool_result = ensure_container_tool(host, ctx, runner, config, on_notice=on_notice)
    result.tool_method = tool_result.get("method")
    if not tool_result["ok"]:
        result.guidance = list(tool_result.get("guidance", []))
        return fail(tool_result["error"])
    if tool_result.get("installed"):
        emit("info", f"{tool} installed successfully!")
    else:
        emit("info", f"{tool} is already installed")

    path_entry = tool_result.get("path_entry")
    if path_entry and path_entry.get("added"):
        result.reload_file = path_entry["config_file"]

    # ── Sandbox ────────────────────────────────────────────────
    enter(WorkflowStage.ENSURE_SANDBOX)
    adapter = DistroboxAdapter(runner, ctx, executable=tool)
    emit("info", f"Checking for sandbox '{name}'...")
    sandbox = ensure_sandbox(
        adapter,
        name,
        config.sandbox.image,
        confirm_recreate,
        query_timeout=timeouts.query,
        timeout=timeouts.sandbox,
    )
    result.decision = sandbox.get("decision")
    if not sandbox["ok"]:
        return fail(sandbox["error"])
    if result.decision is SandboxDecision.REUSE:
        emit("info", f"Using existing sandbox '{name}'")
    else:
        emit("info", f"Sandbox '{name}' created from {config.sandbox.image}")

    # ── Install script ─────────────────────────────────────────
    enter(WorkflowStage.RUN_INSTALL_SCRIPT)
    emit("info", f"Installing {config.app.label} in the sandbox...")
    try:
        with install_script(config) as script:
            run = run_install_script(adapter, name, script, timeout=timeouts.install_script)
    except OSError as e:
        return fail(f"Cannot write the install script: {e}")
    if not run.ok:
        return fail(f"{config.app.label} installation failed ({run.error})")

    # ── Export ─────────────────────────────────────────────────
    enter(WorkflowStage.EXPORT_APP)
    emit("info", f"Exporting {config.app.label} to the host system...")
    exported = export_app(adapter, name, config.app.id, timeout=timeouts.export)
    if not exported.ok:
        return fail(f"Application export failed ({exported.error})")

    result.instructions = launch_instructions(config, reload_file=result.reload_file)
    enter(WorkflowStage.SUCCEEDED)
    emit("info", "Installation completed successfully!")
    return result
