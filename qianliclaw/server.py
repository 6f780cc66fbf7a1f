"""HTTP API for the QianliClaw admin console."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from qianliclaw import __version__
from qianliclaw.config_store import CONFIG_SECTIONS
from qianliclaw.console import Console, ConsoleState
from qianliclaw.schemas import (
    AppSettings,
    ConfigResponse,
    ConfigSchemaResponse,
    ErrorResponse,
    HealthCheckRequest,
    HealthResult,
    LivenessResponse,
    OkResponse,
    SettingsResponse,
    StatusSnapshot,
    StoreError,
    WorkspaceFileResponse,
    WorkspaceFileWrite,
    WorkspaceListing,
)
from qianliclaw.settings import SettingsStore

logger = logging.getLogger(__name__)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def _error(status_code: int, message: str, error_code: str | None = None, **extra: Any) -> JSONResponse:
    """Build an error response in the console's {error: ...} shape."""
    body = ErrorResponse(error=message, error_code=error_code).model_dump(by_alias=True, exclude_none=True)
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def _store_error(error: StoreError, **extra: Any) -> JSONResponse:
    """Map a store error to 400 (caller input) or 500 (everything else)."""
    status_code = 400 if error.is_client_error else 500
    return _error(status_code, error.message, error.kind.value, **extra)


def get_console(request: Request) -> Console:
    """Build the per-request console from application state."""
    return Console(request.app.state.console_state, request.app.state.settings_store)


CONSOLE_DEP = Depends(get_console)


def create_app(settings_store: SettingsStore | None = None) -> FastAPI:
    """Create the console API.

    Settings are read once here so a saved config-root override is in place
    before the first request.

    Args:
        settings_store: Settings store (defaults to ~/.qianliclaw/settings.json)

    Returns:
        Configured FastAPI application
    """
    store = settings_store or SettingsStore()
    initial = store.read()

    app = FastAPI(
        title="QianliClaw Console",
        description="Local admin console for the OpenClaw agent runtime",
        version=__version__,
    )
    app.state.settings_store = store
    app.state.console_state = ConsoleState.from_settings(initial)
    if initial.config_root_override:
        logger.info(f"Using config root override from settings: {initial.config_root_override}")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Liveness ---

    @app.get("/api/health", response_model=LivenessResponse)
    async def liveness() -> LivenessResponse:
        """Liveness probe."""
        return LivenessResponse()

    # --- Config ---

    @app.get("/api/config", response_model=ConfigResponse)
    def get_config(console: Console = CONSOLE_DEP):
        """Return the parsed config and the file it was read from."""
        result = console.config.read()
        if result.error:
            return _error(500, result.error, "parse_error", configPath=result.config_path, config=None)
        return ConfigResponse(config=result.config, config_path=result.config_path)

    @app.put("/api/config", response_model=OkResponse)
    def put_config(body: Any = Body(default=None), console: Console = CONSOLE_DEP):
        """Replace the whole config file with the request body."""
        if not isinstance(body, dict):
            return _error(400, "Body must be a JSON object", "validation_error")
        error = console.config.write(body)
        if error:
            return _error(500, error, "io_error")
        return OkResponse()

    @app.get("/api/config/schema", response_model=ConfigSchemaResponse)
    async def get_config_schema() -> ConfigSchemaResponse:
        """Section metadata for the config editor."""
        return ConfigSchemaResponse(sections=CONFIG_SECTIONS)

    # --- Workspace ---

    @app.get("/api/workspace/files", response_model=WorkspaceListing)
    def list_workspace_files(console: Console = CONSOLE_DEP) -> WorkspaceListing:
        """List the allow-listed workspace files."""
        return console.workspace.list_files()

    @app.get("/api/workspace/files/{name}", response_model=WorkspaceFileResponse)
    def get_workspace_file(name: str, console: Console = CONSOLE_DEP):
        """Return the content of one workspace file."""
        result = console.workspace.read_file(name)
        if result.error:
            return _store_error(result.error, content=None)
        return WorkspaceFileResponse(name=name, content=result.content)

    @app.put("/api/workspace/files/{name}", response_model=OkResponse)
    def put_workspace_file(name: str, body: Any = Body(default=None), console: Console = CONSOLE_DEP):
        """Overwrite one workspace file."""
        write = WorkspaceFileWrite.model_validate(body if isinstance(body, dict) else {})
        error = console.workspace.write_file(name, write.content)
        if error:
            return _store_error(error)
        return OkResponse()

    # --- Status ---

    @app.get("/api/status", response_model=StatusSnapshot)
    def get_status(console: Console = CONSOLE_DEP) -> StatusSnapshot:
        """Aggregated config/workspace/settings status."""
        return console.status.get_status()

    @app.post("/api/status/health", response_model=HealthResult)
    def post_health_check(
        body: HealthCheckRequest | None = None,
        console: Console = CONSOLE_DEP,
    ) -> HealthResult:
        """Run `openclaw health` (blocks up to the health-check timeout)."""
        return console.health_check(body)

    # --- Settings ---

    @app.get("/api/settings", response_model=AppSettings)
    def get_settings(console: Console = CONSOLE_DEP) -> AppSettings:
        """Return the saved settings."""
        return console.settings

    @app.put("/api/settings", response_model=SettingsResponse)
    def put_settings(body: AppSettings, console: Console = CONSOLE_DEP):
        """Merge a partial settings update and persist it."""
        merged, error = console.update_settings(body)
        if error:
            return _error(500, error, "io_error")
        return SettingsResponse(settings=merged)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error=str(exc),
                error_code="INTERNAL_ERROR",
            ).model_dump(by_alias=True, exclude_none=True),
        )

    return app
