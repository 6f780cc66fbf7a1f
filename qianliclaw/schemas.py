"""Pydantic schemas for QianliClaw records and request/response contracts."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, JsonValue, field_validator
from pydantic.alias_generators import to_camel

# An arbitrary JSON object, as stored in openclaw.json
JsonObject = dict[str, JsonValue]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys (the console's wire format)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ErrorKind(str, Enum):
    """Classification of store failures."""

    INVALID_NAME = "invalid_name"
    INVALID_PATH = "invalid_path"
    NOT_CONFIGURED = "not_configured"
    PARSE_ERROR = "parse_error"
    IO_ERROR = "io_error"
    VALIDATION_ERROR = "validation_error"


CLIENT_ERROR_KINDS = frozenset({
    ErrorKind.INVALID_NAME,
    ErrorKind.INVALID_PATH,
    ErrorKind.VALIDATION_ERROR,
})


class StoreError(BaseModel):
    """Inline error returned by a store operation."""

    kind: ErrorKind
    message: str

    @property
    def is_client_error(self) -> bool:
        """Whether the failure was caused by the caller's input."""
        return self.kind in CLIENT_ERROR_KINDS


# --- Persisted records ---


class AppSettings(CamelModel):
    """UI preferences persisted in ~/.qianliclaw/settings.json."""

    config_root_override: str | None = None
    workspace_path_override: str | None = None
    openclaw_cli_path: str | None = None
    gateway_url: str | None = None


# --- Store results ---


class ConfigReadResult(CamelModel):
    """Outcome of reading the config file."""

    config: JsonObject = Field(default_factory=dict)
    config_path: str
    error: str | None = None


class WorkspaceFileEntry(CamelModel):
    """One allow-listed workspace file and whether it is on disk."""

    name: str
    exists: bool


class WorkspaceListing(CamelModel):
    """Listing of the allow-listed workspace files."""

    workspace_path: str | None = None
    files: list[WorkspaceFileEntry] = Field(default_factory=list)
    error: str | None = None


class WorkspaceFileContent(BaseModel):
    """Outcome of reading a workspace file."""

    content: str = ""
    error: StoreError | None = None


class StatusSnapshot(CamelModel):
    """Aggregated console status, recomputed per request."""

    config_path: str
    config_read_ok: bool
    config_error: str | None = None
    workspace_path: str | None = None
    settings: AppSettings = Field(default_factory=AppSettings)


class HealthResult(CamelModel):
    """Outcome of running `openclaw health`."""

    ok: bool
    output: str | None = None
    error: str | None = None


# --- Request Schemas ---


class WorkspaceFileWrite(CamelModel):
    """Body of a workspace file write; non-string content writes an empty file."""

    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def coerce_content(cls, value: object) -> str:
        return value if isinstance(value, str) else ""


class HealthCheckRequest(CamelModel):
    """Body of a health-check request."""

    openclaw_cli_path: str | None = None


# --- Response Schemas ---


class OkResponse(CamelModel):
    """Plain acknowledgement."""

    ok: bool = True


class LivenessResponse(CamelModel):
    """Liveness probe response."""

    ok: bool = True


class ErrorResponse(CamelModel):
    """Error response for failed requests."""

    error: str
    error_code: str | None = None
    config_path: str | None = None


class ConfigResponse(CamelModel):
    """Config payload with the file it came from."""

    config: JsonObject
    config_path: str


class ConfigSection(CamelModel):
    """A top-level config section shown by the editor."""

    key: str
    label: str
    fields: list[str]


class ConfigSchemaResponse(CamelModel):
    """Config editor metadata."""

    sections: list[ConfigSection]


class WorkspaceFileResponse(CamelModel):
    """Content of one workspace file."""

    name: str
    content: str


class SettingsResponse(CamelModel):
    """Result of a settings update."""

    ok: bool = True
    settings: AppSettings
