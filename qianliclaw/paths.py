"""Resolution of the OpenClaw config root and config file name."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Environment variable that points at the config home directly
CONFIG_HOME_ENV = "OPENCLAW_CONFIG_HOME"

PRIMARY_DIR_NAME = ".openclaw"
PRIMARY_FILE_NAME = "openclaw.json"

# Pre-rename layout, still honored when it is the only one on disk
LEGACY_DIR_NAME = ".moltbot"
LEGACY_FILE_NAME = "moltbot.json"


def home_dir() -> Path:
    """Return the user's home directory (USERPROFILE, then HOME)."""
    raw = os.environ.get("USERPROFILE") or os.environ.get("HOME")
    if raw:
        return Path(raw)
    return Path.home()


def resolve_home(raw: str) -> Path:
    """Expand a leading ``~``, ``~/`` or ``~\\`` to the home directory.

    Any other path (including ``~user`` and relative paths) is returned as is.
    """
    if raw == "~":
        return home_dir()
    if raw.startswith("~/") or raw.startswith("~\\"):
        return home_dir() / raw[2:]
    return Path(raw)


def _probe(path: Path) -> bool:
    """Existence check that treats any OS error as "missing"."""
    try:
        return os.path.exists(path)
    except (OSError, ValueError):
        return False


def get_config_root(override: str | None = None) -> Path:
    """Resolve the config root directory.

    Priority: explicit override > $OPENCLAW_CONFIG_HOME > existing
    ~/.openclaw/openclaw.json > existing ~/.moltbot/moltbot.json > ~/.openclaw.

    Args:
        override: Optional override path (blank means unset)

    Returns:
        Config root directory (need not exist)
    """
    if override and override.strip():
        return resolve_home(override.strip())

    env_root = os.environ.get(CONFIG_HOME_ENV)
    if env_root:
        return resolve_home(env_root)

    home = home_dir()
    primary = home / PRIMARY_DIR_NAME
    legacy = home / LEGACY_DIR_NAME

    if _probe(primary / PRIMARY_FILE_NAME):
        return primary
    if _probe(legacy / LEGACY_FILE_NAME):
        logger.debug(f"Using legacy config root: {legacy}")
        return legacy
    return primary


def get_config_file_name(config_root: Path | str) -> str:
    """Config file name for a root: moltbot.json for .moltbot roots."""
    if Path(config_root).name == LEGACY_DIR_NAME:
        return LEGACY_FILE_NAME
    return PRIMARY_FILE_NAME


def get_config_file_path(config_root: Path | str) -> Path:
    """Full path of the config file inside a root."""
    return Path(config_root) / get_config_file_name(config_root)


def ensure_dir(path: Path | str) -> None:
    """Create a directory (and parents) if missing."""
    Path(path).mkdir(parents=True, exist_ok=True)
