"""
Shared helpers for CLI commands — config, host context and runner lookup.

Tests inject a ``HostContext`` and a ``MockRunner`` through ``obj``::

    runner.invoke(cli, ["install"], obj={"host_context": ctx, "runner": mock})
"""

from __future__ import annotations

import sys

import click

from boxinstaller.adapters.base import Runner
from boxinstaller.adapters.runner import SubprocessRunner
from boxinstaller.core.config.loader import ConfigError, load_config
from boxinstaller.core.context import HostContext
from boxinstaller.core.models.config import InstallerConfig

_LEVEL_STYLE = {
    "info": ("[INFO]", "green"),
    "warning": ("[WARNING]", "yellow"),
    "error": ("[ERROR]", "red"),
}


def load_config_or_exit(ctx: click.Context) -> InstallerConfig:
    """Load installer.yml (or defaults); exit 1 on a config error."""
    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def host_context(ctx: click.Context) -> HostContext:
    """The run's HostContext, created once per invocation."""
    if ctx.obj.get("host_context") is None:
        ctx.obj["host_context"] = HostContext.from_environ()
    return ctx.obj["host_context"]


def command_runner(ctx: click.Context) -> Runner:
    if ctx.obj.get("runner") is None:
        ctx.obj["runner"] = SubprocessRunner()
    return ctx.obj["runner"]


def echo_message(level: str, message: str) -> None:
    """Print one labelled progress line."""
    label, color = _LEVEL_STYLE.get(level, ("[INFO]", "green"))
    click.secho(label, fg=color, nl=False)
    click.echo(f" {message}")
