"""Workspace persona files (USER.md, SOUL.md, ...) read and written by the console."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from qianliclaw.config_store import ConfigStore
from qianliclaw.paths import ensure_dir, resolve_home
from qianliclaw.schemas import (
    AppSettings,
    ErrorKind,
    StoreError,
    WorkspaceFileContent,
    WorkspaceFileEntry,
    WorkspaceListing,
)

logger = logging.getLogger(__name__)

# The only files the console may touch, in display order
WORKSPACE_FILES: tuple[str, ...] = (
    "USER.md",
    "IDENTITY.md",
    "SOUL.md",
    "AGENTS.md",
    "TOOLS.md",
    "BOOTSTRAP.md",
)

FILE_DESCRIPTIONS: dict[str, str] = {
    "USER.md": "User profile and preferences",
    "IDENTITY.md": "Agent name, style and emoji",
    "SOUL.md": "Persona, boundaries and tone",
    "AGENTS.md": "Operating instructions and memory",
    "TOOLS.md": "Tool notes",
    "BOOTSTRAP.md": "First-run bootstrap",
}

NO_WORKSPACE_CONFIGURED = "No workspace path in config (agents.defaults.workspace)"
WORKSPACE_MISSING = "Workspace directory does not exist"


def is_allowed_name(name: str) -> bool:
    """Check a file name against the allow-list."""
    return name in WORKSPACE_FILES


def _escapes(workspace: Path, candidate: Path) -> bool:
    """True if candidate's path relative to workspace starts with '..'."""
    try:
        relative = os.path.relpath(os.path.abspath(candidate), os.path.abspath(workspace))
    except ValueError:
        # Different drives on Windows
        return True
    return relative == os.pardir or relative.startswith(os.pardir + os.sep)


class WorkspaceStore:
    """Allow-listed file access inside the agent workspace directory."""

    def __init__(self, config_store: ConfigStore, settings: AppSettings):
        self.config_store = config_store
        self.settings = settings

    def get_workspace_dir(self) -> Path | None:
        """Settings override first, then agents.defaults.workspace from config."""
        override = self.settings.workspace_path_override
        if override and override.strip():
            return Path(os.path.abspath(resolve_home(override.strip())))
        return self.config_store.get_workspace_path()

    def list_files(self) -> WorkspaceListing:
        """List all allow-listed files with their existence on disk."""
        workspace = self.get_workspace_dir()
        if workspace is None:
            return WorkspaceListing(
                workspace_path=None,
                files=[WorkspaceFileEntry(name=name, exists=False) for name in WORKSPACE_FILES],
                error=NO_WORKSPACE_CONFIGURED,
            )

        missing = [WorkspaceFileEntry(name=name, exists=False) for name in WORKSPACE_FILES]
        try:
            if not workspace.is_dir():
                return WorkspaceListing(workspace_path=str(workspace), files=missing, error=WORKSPACE_MISSING)
            files = [
                WorkspaceFileEntry(name=name, exists=(workspace / name).is_file())
                for name in WORKSPACE_FILES
            ]
        except OSError as e:
            logger.warning(f"Failed to list workspace {workspace}: {e}")
            return WorkspaceListing(workspace_path=str(workspace), files=missing, error=str(e))

        return WorkspaceListing(workspace_path=str(workspace), files=files)

    def read_file(self, name: str) -> WorkspaceFileContent:
        """Read one workspace file; a missing file reads as empty content.

        Args:
            name: One of WORKSPACE_FILES

        Returns:
            WorkspaceFileContent with content, or an inline error
        """
        if not is_allowed_name(name):
            return WorkspaceFileContent(error=StoreError(kind=ErrorKind.INVALID_NAME, message="Invalid file name"))

        workspace = self.get_workspace_dir()
        if workspace is None:
            return WorkspaceFileContent(error=StoreError(kind=ErrorKind.NOT_CONFIGURED, message="No workspace path"))

        full_path = workspace / name
        if _escapes(workspace, full_path):
            logger.warning(f"Rejected workspace read outside {workspace}: {name!r}")
            return WorkspaceFileContent(error=StoreError(kind=ErrorKind.INVALID_PATH, message="Invalid path"))

        try:
            # Bytes in, bytes out: no newline translation
            content = full_path.read_bytes().decode("utf-8")
        except (FileNotFoundError, NotADirectoryError):
            return WorkspaceFileContent(content="")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {full_path}: {e}")
            return WorkspaceFileContent(error=StoreError(kind=ErrorKind.IO_ERROR, message=str(e)))

        return WorkspaceFileContent(content=content)

    def write_file(self, name: str, content: str) -> StoreError | None:
        """Overwrite one workspace file, creating the workspace if needed.

        Args:
            name: One of WORKSPACE_FILES
            content: Full UTF-8 text content

        Returns:
            StoreError on failure, None on success
        """
        if not is_allowed_name(name):
            return StoreError(kind=ErrorKind.INVALID_NAME, message="Invalid file name")

        workspace = self.get_workspace_dir()
        if workspace is None:
            return StoreError(kind=ErrorKind.NOT_CONFIGURED, message="No workspace path")

        full_path = workspace / name
        if full_path.parent != workspace or _escapes(workspace, full_path):
            logger.warning(f"Rejected workspace write outside {workspace}: {name!r}")
            return StoreError(kind=ErrorKind.INVALID_PATH, message="Invalid path")

        try:
            ensure_dir(workspace)
            full_path.write_bytes(content.encode("utf-8"))
        except (OSError, UnicodeEncodeError) as e:
            logger.error(f"Failed to write {full_path}: {e}")
            return StoreError(kind=ErrorKind.IO_ERROR, message=str(e))

        logger.info(f"Wrote workspace file {full_path} ({len(content)} chars)")
        return None
