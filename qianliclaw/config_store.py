"""Read/write access to the OpenClaw config file (openclaw.json / moltbot.json)."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path

import json5
from pydantic import JsonValue

from qianliclaw.paths import ensure_dir, get_config_file_path, get_config_root, resolve_home
from qianliclaw.schemas import ConfigReadResult, ConfigSection, JsonObject

logger = logging.getLogger(__name__)

# Location of the agent workspace inside the config
WORKSPACE_KEY_PATH = ("agents", "defaults", "workspace")

# Sections surfaced by the config editor
CONFIG_SECTIONS: list[ConfigSection] = [
    ConfigSection(key="gateway", label="Gateway", fields=["port", "reload"]),
    ConfigSection(key="agents", label="Agents", fields=["defaults", "list", "bindings"]),
    ConfigSection(key="channels", label="Channels", fields=["whatsapp", "telegram", "discord"]),
    ConfigSection(key="session", label="Session", fields=["dmScope", "reset"]),
    ConfigSection(key="tools", label="Tools & Automation", fields=["tools", "cron", "hooks"]),
]


def get_nested(value: JsonValue, path: Sequence[str]) -> JsonValue:
    """Descend through nested objects along ``path``.

    Returns None as soon as a segment is missing or a non-object is hit.
    """
    current = value
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def get_nested_str(value: JsonValue, path: Sequence[str]) -> str | None:
    """Like get_nested, but only returns non-blank strings (stripped)."""
    found = get_nested(value, path)
    if not isinstance(found, str) or not found.strip():
        return None
    return found.strip()


class ConfigStore:
    """Config file store bound to one config-root override."""

    def __init__(self, config_root_override: str | None = None):
        self.config_root_override = config_root_override

    @property
    def config_root(self) -> Path:
        return get_config_root(self.config_root_override)

    @property
    def config_path(self) -> Path:
        return get_config_file_path(self.config_root)

    def read(self) -> ConfigReadResult:
        """Read and parse the config file (JSON5).

        A missing file is an empty config. Parse failures return an empty
        config together with the error and the resolved path.
        """
        config_path = self.config_path
        try:
            raw = config_path.read_text(encoding="utf-8")
            config = json5.loads(raw)
        except (FileNotFoundError, NotADirectoryError):
            logger.debug(f"No config file at {config_path}")
            return ConfigReadResult(config={}, config_path=str(config_path))
        except (OSError, RecursionError, ValueError) as e:
            logger.warning(f"Failed to parse config {config_path}: {e}")
            return ConfigReadResult(config={}, config_path=str(config_path), error=str(e))

        if not isinstance(config, dict):
            message = "Config root must be a JSON object"
            logger.warning(f"{message}: {config_path}")
            return ConfigReadResult(config={}, config_path=str(config_path), error=message)

        return ConfigReadResult(config=config, config_path=str(config_path))

    def write(self, config: JsonObject) -> str | None:
        """Overwrite the config file with strict, 2-space indented JSON.

        Args:
            config: Full config object (callers validate it is an object)

        Returns:
            Error message on failure, None on success
        """
        config_path = self.config_path
        try:
            ensure_dir(config_path.parent)
            content = json.dumps(config, indent=2, ensure_ascii=False, allow_nan=False)
            config_path.write_text(content, encoding="utf-8")
        except (OSError, RecursionError, TypeError, ValueError) as e:
            logger.error(f"Failed to write config {config_path}: {e}")
            return str(e)

        logger.info(f"Wrote config to {config_path}")
        return None

    def get_workspace_path(self) -> Path | None:
        """Workspace directory from agents.defaults.workspace, tilde-expanded."""
        workspace = get_nested_str(self.read().config, WORKSPACE_KEY_PATH)
        if workspace is None:
            return None
        return resolve_home(workspace)
