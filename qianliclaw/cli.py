"""CLI for QianliClaw - run the console server and inspect local state."""

from __future__ import annotations

import json
import os
import sys

import click

from qianliclaw import __version__

DEFAULT_PORT = 3840


def _load_console():
    """Build a console from the saved settings, as the server does at startup."""
    from qianliclaw.console import Console, ConsoleState
    from qianliclaw.settings import SettingsStore

    store = SettingsStore()
    return Console(ConsoleState.from_settings(store.read()), store)


@click.group()
@click.version_option(version=__version__, prog_name="qianliclaw")
def main() -> None:
    """QianliClaw - local admin console for the OpenClaw agent runtime.

    Edit openclaw.json, the workspace persona files and console settings.
    """
    pass


@main.command()
@click.option("--port", default=lambda: int(os.environ.get("PORT", DEFAULT_PORT)), type=int, help="Port to run the console on")
@click.option("--host", default="127.0.0.1", help="Host to bind to")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(port: int, host: str, reload: bool) -> None:
    """Start the console HTTP server."""
    import uvicorn

    click.echo(f"Starting qianliclaw server on http://{host}:{port}")
    uvicorn.run(
        "qianliclaw.server:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@main.command()
@click.option("--raw", is_flag=True, help="Output raw JSON instead of formatted text")
def status(raw: bool) -> None:
    """Show the resolved config path, workspace and settings."""
    snapshot = _load_console().status.get_status()

    if raw:
        click.echo(json.dumps(snapshot.model_dump(by_alias=True), indent=2))
        return

    click.echo(f"Config:    {snapshot.config_path}")
    if snapshot.config_read_ok:
        click.echo("           parsed OK")
    else:
        click.echo(f"           parse error: {snapshot.config_error}")
    click.echo(f"Workspace: {snapshot.workspace_path or '(not configured)'}")

    settings = snapshot.settings.model_dump(by_alias=True)
    click.echo("Settings:")
    for key, value in settings.items():
        click.echo(f"  {key}: {value if value is not None else '-'}")


@main.command()
@click.option(
    "--cli-path", "-c",
    default=None,
    help="Path to the openclaw executable (defaults to the saved setting, then PATH)",
)
def health(cli_path: str | None) -> None:
    """Run `openclaw health` and report the result.

    \b
    Example:
        qianliclaw health
        qianliclaw health --cli-path /opt/openclaw/bin/openclaw
    """
    from qianliclaw.schemas import HealthCheckRequest

    console = _load_console()
    request = HealthCheckRequest(openclaw_cli_path=cli_path) if cli_path else None
    result = console.health_check(request)

    if result.ok:
        click.echo(result.output or "")
        click.echo("✓ openclaw is healthy")
        return

    click.echo(result.error or "", err=True)
    click.echo("✗ openclaw health check failed", err=True)
    sys.exit(1)


@main.command()
@click.option("--raw", is_flag=True, help="Output raw JSON instead of formatted text")
def files(raw: bool) -> None:
    """List the workspace persona files."""
    from qianliclaw.workspace import FILE_DESCRIPTIONS

    listing = _load_console().workspace.list_files()

    if raw:
        click.echo(json.dumps(listing.model_dump(by_alias=True), indent=2))
        return

    click.echo(f"Workspace: {listing.workspace_path or '(not configured)'}")
    if listing.error:
        click.echo(f"  {listing.error}")
    for entry in listing.files:
        marker = "✓" if entry.exists else " "
        click.echo(f"  [{marker}] {entry.name:<13} {FILE_DESCRIPTIONS.get(entry.name, '')}")


if __name__ == "__main__":
    main()
