"""Console status snapshot and the `openclaw health` check."""

from __future__ import annotations

import logging
import subprocess

from qianliclaw.config_store import ConfigStore
from qianliclaw.schemas import AppSettings, HealthResult, StatusSnapshot
from qianliclaw.workspace import WorkspaceStore

logger = logging.getLogger(__name__)

# Default timeout
HEALTH_CHECK_TIMEOUT = 10  # seconds

# Resolved through PATH when no CLI path is configured
DEFAULT_CLI = "openclaw"


class StatusReporter:
    """Aggregates config, workspace and settings state for the status page."""

    def __init__(
        self,
        config_store: ConfigStore,
        workspace_store: WorkspaceStore,
        settings: AppSettings,
    ):
        self.config_store = config_store
        self.workspace_store = workspace_store
        self.settings = settings

    def get_status(self) -> StatusSnapshot:
        """Build a fresh status snapshot."""
        result = self.config_store.read()
        workspace = self.workspace_store.get_workspace_dir()
        return StatusSnapshot(
            config_path=result.config_path,
            config_read_ok=result.error is None,
            config_error=result.error,
            workspace_path=str(workspace) if workspace is not None else None,
            settings=self.settings,
        )


def build_health_command(cli_path: str | None) -> list[str]:
    """Build argv for the health check.

    A configured CLI path is passed as a single argv element, so paths with
    spaces need no quoting.
    """
    if cli_path and cli_path.strip():
        return [cli_path.strip(), "health"]
    return [DEFAULT_CLI, "health"]


def _as_text(value: str | bytes | None) -> str:
    """Normalize captured output (bytes after a timeout) to text."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _combine_output(stdout: str | bytes | None, stderr: str | bytes | None, fallback: str) -> str:
    """Join stdout and stderr, or fall back to the failure message."""
    parts = [part for part in (_as_text(stdout), _as_text(stderr)) if part]
    return "\n".join(parts) or fallback


def run_health_check(
    cli_path: str | None,
    timeout_seconds: float = HEALTH_CHECK_TIMEOUT,
) -> HealthResult:
    """Run `<cli> health` and report the outcome.

    Blocks until the command exits or the timeout fires; on timeout the
    child is killed and reaped before returning.

    Args:
        cli_path: Optional path to the openclaw executable
        timeout_seconds: Wall-clock limit for the command

    Returns:
        HealthResult with output on success, or error text on failure
    """
    command = build_health_command(cli_path)
    logger.info(f"Running health check: {command}")

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            timeout=timeout_seconds,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except subprocess.TimeoutExpired as e:
        logger.warning(f"Health check timed out after {timeout_seconds}s: {command}")
        fallback = f"Command timed out after {timeout_seconds} seconds"
        return HealthResult(ok=False, error=_combine_output(e.stdout, e.stderr, fallback))
    except OSError as e:
        logger.warning(f"Health check could not start: {e}")
        return HealthResult(ok=False, error=str(e) or f"Failed to run {command[0]}")

    if result.returncode != 0:
        logger.warning(f"Health check failed with exit code {result.returncode}")
        fallback = f"Command failed with exit code {result.returncode}: {' '.join(command)}"
        return HealthResult(ok=False, error=_combine_output(result.stdout, result.stderr, fallback))

    return HealthResult(ok=True, output=result.stdout)
