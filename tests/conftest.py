"""Pytest configuration and fixtures for QianliClaw tests."""

import pytest
from pathlib import Path

from qianliclaw.settings import SettingsStore


@pytest.fixture
def home(tmp_path: Path, monkeypatch) -> Path:
    """Point the user home at a temporary directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("USERPROFILE", raising=False)
    monkeypatch.delenv("OPENCLAW_CONFIG_HOME", raising=False)
    return home


@pytest.fixture
def config_root(home: Path) -> Path:
    """Default config root (~/.openclaw), not yet created."""
    return home / ".openclaw"


@pytest.fixture
def settings_store(home: Path) -> SettingsStore:
    """Settings store at ~/.qianliclaw/settings.json."""
    return SettingsStore()


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    """A workspace directory path (not yet created)."""
    return tmp_path / "workspace"


@pytest.fixture
def write_config(config_root: Path):
    """Write raw text to ~/.openclaw/openclaw.json."""

    def _write(text: str) -> Path:
        config_root.mkdir(parents=True, exist_ok=True)
        path = config_root / "openclaw.json"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
