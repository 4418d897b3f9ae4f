"""
In-sandbox installer — the five-step script run inside the sandbox.

The steps are rendered into a bash script with ``set -euo pipefail``, so
the first failing step aborts the rest.  The script file lives in a
temporary location visible from inside the distrobox and is removed when
the ``install_script`` context exits, whatever the outcome.
"""

from __future__ import annotations

import logging
import os
import shlex
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from boxinstaller.adapters.containers.distrobox import DistroboxAdapter
from boxinstaller.core.models.config import InstallerConfig
from boxinstaller.core.models.result import CommandResult

logger = logging.getLogger(__name__)


@dataclass
class InstallStep:
    """One numbered step of the script."""

    label: str
    commands: list[str] = field(default_factory=list)


@dataclass
class InstallScript:
    """Handle to a materialized script file."""

    path: Path
    steps: list[InstallStep]


def build_install_steps(config: InstallerConfig) -> list[InstallStep]:
    """The ordered steps for ``config.app``."""
    app = config.app
    repo = app.repository
    q = shlex.quote
    keyring_file = q(repo.keyring_file)
    sources_file = q(repo.sources_file)

    return [
        InstallStep(
            label=f"Downloading and configuring {app.menu_name} GPG keys...",
            commands=[
                f"wget -O- {q(repo.key_url)} | gpg --dearmor > {keyring_file}",
                f"cat {keyring_file} | sudo tee {q(repo.keyring_path)} > /dev/null",
            ],
        ),
        InstallStep(
            label=f"Adding {app.menu_name} repository...",
            commands=[
                f"wget -O {sources_file} {q(repo.sources_url)}",
                f"cat {sources_file} | sudo tee {q(repo.sources_path)} > /dev/null",
            ],
        ),
        InstallStep(
            label=f"Updating repositories and installing {app.label}...",
            commands=[
                "sudo apt update",
                "sudo apt install -y " + " ".join(q(p) for p in app.packages),
            ],
        ),
        InstallStep(label=f"{app.label} installed successfully!"),
        InstallStep(
            label="Cleaning up temporary files...",
            commands=[f"rm -f {sources_file} {keyring_file}"],
        ),
    ]


def render_install_script(config: InstallerConfig) -> str:
    """Render the steps as a fail-fast bash script."""
    steps = build_install_steps(config)
    total = len(steps)
    lines = ["#!/bin/bash", "", "set -euo pipefail", ""]
    for number, step in enumerate(steps, start=1):
        lines.append(f"echo {shlex.quote(f'[{number}/{total}] {step.label}')}")
        lines.extend(step.commands)
        lines.append("")
    return "\n".join(lines)


@contextmanager
def install_script(config: InstallerConfig) -> Iterator[InstallScript]:
    """Materialize the script; remove it on every exit path.

    Usage::

        with install_script(config) as script:
            result = run_install_script(adapter, name, script)
    """
    script_dir = config.script_dir or tempfile.gettempdir()
    fd, path = tempfile.mkstemp(
        suffix=".sh",
        prefix=f"{config.app.id}_install_",
        dir=script_dir,
    )
    handle = InstallScript(path=Path(path), steps=build_install_steps(config))
    try:
        try:
            os.write(fd, render_install_script(config).encode("utf-8"))
        finally:
            os.close(fd)
        os.chmod(path, 0o755)
        logger.debug("Install script written to %s", path)
        yield handle
    finally:
        try:
            os.unlink(path)
            logger.debug("Install script removed: %s", path)
        except FileNotFoundError:
            pass


def run_install_script(
    adapter: DistroboxAdapter,
    sandbox: str,
    script: InstallScript,
    timeout: int | None = None,
) -> CommandResult:
    """Run the script inside ``sandbox``; the exit status is propagated."""
    logger.info("Running %d-step install script in %s", len(script.steps), sandbox)
    return adapter.enter(sandbox, ["bash", str(script.path)], timeout=timeout)
