"""
CLI commands for the managed sandbox.

Thin wrappers over ``boxinstaller.core.use_cases.detect`` and the
distrobox adapter, for inspecting or resetting the one named sandbox.
"""

from __future__ import annotations

import json
import sys

import click

from boxinstaller.ui.cli.helpers import (
    command_runner,
    echo_message,
    host_context,
    load_config_or_exit,
)


@click.group()
def sandbox() -> None:
    """Sandbox — status, remove, export."""


@sandbox.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, as_json: bool) -> None:
    """Show whether the configured sandbox exists."""
    from boxinstaller.core.use_cases.detect import sandbox_status

    config = load_config_or_exit(ctx)
    env, error = sandbox_status(config, host_context(ctx), command_runner(ctx))

    if as_json:
        data = env.to_dict()
        if error:
            data["error"] = error
        click.echo(json.dumps(data, indent=2))
        sys.exit(1 if error else 0)

    if error:
        click.secho(f"❌ {error}", fg="red")
        sys.exit(1)

    click.secho(f"📦 {env.name}", fg="cyan", bold=True)
    click.echo(f"   Image:  {env.base_image}")
    state = "✅ present" if env.exists else "⊘ absent"
    click.echo(f"   State:  {state}")


@sandbox.command()
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_context
def remove(ctx: click.Context, yes: bool) -> None:
    """Force-remove the configured sandbox."""
    from boxinstaller.adapters.containers.distrobox import DistroboxAdapter

    config = load_config_or_exit(ctx)
    adapter = DistroboxAdapter(
        command_runner(ctx), host_context(ctx), executable=config.sandbox.tool
    )
    name = config.sandbox.name

    if not adapter.is_available():
        click.secho(f"❌ {config.sandbox.tool} is not installed", fg="red")
        sys.exit(1)

    listing = adapter.exists(name, timeout=config.timeouts.query)
    if not listing.ok:
        click.secho(f"❌ Cannot list sandboxes: {listing.error}", fg="red")
        sys.exit(1)
    if not listing.metadata.get("exists"):
        click.secho(f"Sandbox '{name}' does not exist.", fg="yellow")
        return

    if not yes and not click.confirm(f"Remove sandbox '{name}'?", default=False):
        click.echo("Aborted.")
        return

    result = adapter.remove(name, timeout=config.timeouts.sandbox)
    if not result.ok:
        echo_message("error", f"Sandbox removal failed: {result.error}")
        sys.exit(1)
    echo_message("info", f"Sandbox '{name}' removed")


@sandbox.command("export")
@click.pass_context
def export_cmd(ctx: click.Context) -> None:
    """Re-export the application launcher to the host."""
    from boxinstaller.adapters.containers.distrobox import DistroboxAdapter
    from boxinstaller.core.services.exporter import export_app, launch_instructions

    config = load_config_or_exit(ctx)
    adapter = DistroboxAdapter(
        command_runner(ctx), host_context(ctx), executable=config.sandbox.tool
    )

    if not adapter.is_available():
        click.secho(f"❌ {config.sandbox.tool} is not installed", fg="red")
        sys.exit(1)

    echo_message("info", f"Exporting {config.app.label} to the host system...")
    result = export_app(
        adapter, config.sandbox.name, config.app.id, timeout=config.timeouts.export
    )
    if not result.ok:
        echo_message("error", f"Application export failed ({result.error})")
        sys.exit(1)

    for line in launch_instructions(config):
        echo_message("info", line)
