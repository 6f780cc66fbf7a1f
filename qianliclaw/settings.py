"""Persistent UI settings stored under ~/.qianliclaw."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from qianliclaw.paths import ensure_dir, home_dir
from qianliclaw.schemas import AppSettings

logger = logging.getLogger(__name__)

SETTINGS_DIR_NAME = ".qianliclaw"
SETTINGS_FILE_NAME = "settings.json"


def default_settings_path() -> Path:
    """Return ~/.qianliclaw/settings.json for the current user."""
    return home_dir() / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME


def merge_settings(current: AppSettings, changes: AppSettings) -> AppSettings:
    """Merge a partial update into the current settings.

    Only fields that were present in ``changes`` (including explicit nulls)
    overwrite; omitted fields keep their current value.
    """
    updates = {name: getattr(changes, name) for name in changes.model_fields_set}
    return current.model_copy(update=updates)


class SettingsStore:
    """JSON file store for AppSettings."""

    def __init__(self, settings_path: Path | str | None = None):
        """Initialize the store.

        Args:
            settings_path: Path to the settings file (defaults to
                ~/.qianliclaw/settings.json)
        """
        self.settings_path = Path(settings_path) if settings_path else default_settings_path()

    def read(self) -> AppSettings:
        """Read settings; any failure yields the default record."""
        try:
            data = json.loads(self.settings_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("settings root is not a JSON object")
            return AppSettings.model_validate(data)
        except (FileNotFoundError, NotADirectoryError):
            return AppSettings()
        except (OSError, RecursionError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.settings_path}: {e}")
            return AppSettings()

    def write(self, settings: AppSettings) -> str | None:
        """Write settings as pretty JSON.

        Returns:
            Error message on failure, None on success
        """
        try:
            ensure_dir(self.settings_path.parent)
            content = json.dumps(settings.model_dump(by_alias=True), indent=2, ensure_ascii=False)
            self.settings_path.write_text(content, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to write settings {self.settings_path}: {e}")
            return str(e)

        logger.info(f"Saved settings to {self.settings_path}")
        return None
