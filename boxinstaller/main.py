"""
boxinstaller — CLI entrypoint.

Usage:
    boxinstaller --help
    boxinstaller detect
    boxinstaller install
    boxinstaller config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click
import yaml

from boxinstaller import __version__
from boxinstaller.core.models.sandbox import RecreatePolicy
from boxinstaller.core.observability.logging_config import resolve_level, setup_logging
from boxinstaller.ui.cli.helpers import (
    command_runner,
    echo_message,
    host_context,
    load_config_or_exit,
)


@click.group()
@click.version_option(version=__version__, prog_name="boxinstaller")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to installer.yml (default: auto-detect, else built-in defaults).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """boxinstaller — install a desktop app inside a distrobox sandbox."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(
            debug=debug,
            verbose=verbose,
            quiet=quiet,
            env_level=os.environ.get("BOXINSTALLER_LOG_LEVEL"),
        ),
        log_file=os.environ.get("BOXINSTALLER_LOG_FILE"),
        log_file_level=os.environ.get("BOXINSTALLER_LOG_FILE_LEVEL"),
    )


def _confirm_recreate(name: str) -> bool:
    echo_message("warning", f"The sandbox '{name}' already exists")
    return click.confirm("Do you want to remove it and recreate it?", default=False)


@cli.command()
@click.option(
    "--on-existing",
    "on_existing",
    type=click.Choice([p.value for p in RecreatePolicy]),
    default=None,
    help="What to do if the sandbox exists (default: ask on a terminal, else reuse).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, on_existing: str | None, as_json: bool) -> None:
    """Provision the sandbox, install the app in it and export its launcher.

    Examples:

        boxinstaller install

        boxinstaller install --on-existing recreate

        boxinstaller --config signal.yml install --json
    """
    from boxinstaller.core.use_cases.install import run_install

    config = load_config_or_exit(ctx)

    if on_existing is None:
        interactive = sys.stdin.isatty() and not as_json
        policy = RecreatePolicy.ASK if interactive else RecreatePolicy.REUSE
    else:
        policy = RecreatePolicy(on_existing)

    confirm = {
        RecreatePolicy.ASK: _confirm_recreate,
        RecreatePolicy.REUSE: None,
        RecreatePolicy.RECREATE: lambda name: True,
    }[policy]

    quiet = ctx.obj.get("quiet", False)

    def on_progress(stage, level: str, message: str) -> None:
        if as_json or (quiet and level == "info"):
            return
        echo_message(level, message)

    if not as_json and not quiet:
        click.secho(f"\n=== {config.app.label} Sandbox Installer ===", fg="cyan", bold=True)
        click.echo(
            f"   Installs {config.app.label} in the '{config.sandbox.name}' "
            f"sandbox ({config.sandbox.image})"
        )
        click.echo()

    result = run_install(
        config,
        host_context(ctx),
        command_runner(ctx),
        confirm_recreate=confirm,
        on_progress=on_progress,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(result.exit_code)

    if not result.ok:
        for line in result.guidance:
            echo_message("info", line)
        click.echo()
        sys.exit(result.exit_code)

    click.echo()
    click.secho("✅ Installation completed successfully!", fg="green", bold=True)
    for line in result.instructions:
        click.echo(f"   {line}" if line else "")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Detect package manager, shell, container runtime and the sandbox."""
    from boxinstaller.core.use_cases.detect import run_detect

    config = load_config_or_exit(ctx)
    result = run_detect(config, host_context(ctx), command_runner(ctx))
    prereqs = result.prerequisites
    assert result.host is not None and prereqs is not None

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if prereqs.ok else 1)

    host = result.host
    click.secho("\n🔍 Host environment", fg="cyan", bold=True)
    click.echo(f"   Package manager:  {host.package_manager.value}")
    click.echo(f"   Shell:            {host.shell.value}  ({result.shell_config_file})")
    runtime = host.container_runtime or "none"
    if host.container_runtime in result.versions:
        runtime += f" {result.versions[host.container_runtime]}"
    click.echo(f"   Container runtime: {runtime}")
    click.echo(f"   curl / wget:      {'✓' if host.has_curl else '✗'} / {'✓' if host.has_wget else '✗'}")

    tool_line = result.tool_path or "not installed"
    if result.tool in result.versions:
        tool_line += f" ({result.versions[result.tool]})"
    click.echo(f"   {result.tool}:        {tool_line}")

    if result.sandbox and not result.error:
        state = "present" if result.sandbox.exists else "absent"
        click.echo(f"   Sandbox:          {result.sandbox.name} ({state})")

    if prereqs.warnings:
        click.echo()
        for warning in prereqs.warnings:
            click.secho(f"   ⚠️  {warning}", fg="yellow")

    if not prereqs.ok:
        click.echo()
        for error in prereqs.errors:
            click.secho(f"   ❌ {error}", fg="red")
        click.echo()
        sys.exit(1)

    click.echo()


@cli.group()
def config() -> None:
    """Installer configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate installer.yml."""
    from boxinstaller.core.config.loader import ConfigError, find_config_file, load_config

    path = ctx.obj.get("config_path") or find_config_file()
    try:
        cfg = load_config(path, search=False)
    except ConfigError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
        else:
            click.secho("❌ Configuration error:", fg="red", bold=True)
            click.echo(f"   • {e}")
        sys.exit(1)

    source = str(path) if path else "(built-in defaults)"
    if as_json:
        click.echo(json.dumps({
            "valid": True,
            "source": source,
            "sandbox": cfg.sandbox.name,
            "app": cfg.app.id,
        }, indent=2))
        return

    click.secho("✅ Configuration is valid", fg="green", bold=True)
    click.echo(f"   Source:  {source}")
    click.echo(f"   Sandbox: {cfg.sandbox.name} ({cfg.sandbox.image})")
    click.echo(f"   App:     {cfg.app.id}")


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration as YAML."""
    cfg = load_config_or_exit(ctx)
    click.echo(yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False).rstrip())


# ── Register sub-command groups from boxinstaller/ui/cli/ ─────────

from boxinstaller.ui.cli.sandbox import sandbox  # noqa: E402

cli.add_command(sandbox)


if __name__ == "__main__":
    cli()
