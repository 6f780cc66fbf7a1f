"""Request-scoped handle bundling the console's stores."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from qianliclaw.config_store import ConfigStore
from qianliclaw.schemas import AppSettings, HealthCheckRequest, HealthResult
from qianliclaw.settings import SettingsStore, merge_settings
from qianliclaw.status import StatusReporter, run_health_check
from qianliclaw.workspace import WorkspaceStore

logger = logging.getLogger(__name__)


@dataclass
class ConsoleState:
    """Application-wide state shared by all requests.

    The config-root override is the only mutable field; it is replaced
    (never mutated in place) when settings are saved.
    """

    config_root_override: str | None = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> ConsoleState:
        return cls(config_root_override=settings.config_root_override)


class Console:
    """Stores for one request, built from the current state and settings."""

    def __init__(self, state: ConsoleState, settings_store: SettingsStore):
        self.state = state
        self.settings_store = settings_store
        self.settings = settings_store.read()
        self.config = ConfigStore(config_root_override=state.config_root_override)
        self.workspace = WorkspaceStore(self.config, self.settings)
        self.status = StatusReporter(self.config, self.workspace, self.settings)

    def update_settings(self, changes: AppSettings) -> tuple[AppSettings, str | None]:
        """Merge and persist a partial settings update.

        On success the merged config-root override applies to every later
        request.

        Returns:
            Tuple of (merged settings, error message or None)
        """
        merged = merge_settings(self.settings, changes)
        error = self.settings_store.write(merged)
        if error is not None:
            return merged, error

        self.settings = merged
        if merged.config_root_override != self.state.config_root_override:
            logger.info(f"Config root override set to {merged.config_root_override!r}")
        self.state.config_root_override = merged.config_root_override
        return merged, None

    def health_check(self, request: HealthCheckRequest | None = None) -> HealthResult:
        """Run the health check with the request's CLI path, else the saved one."""
        if request is not None and "openclaw_cli_path" in request.model_fields_set:
            cli_path = request.openclaw_cli_path
        else:
            cli_path = self.settings.openclaw_cli_path
        return run_health_check(cli_path)
