"""Tests for the settings store."""

import json

import pytest

from qianliclaw.schemas import AppSettings
from qianliclaw.settings import SettingsStore, default_settings_path, merge_settings


class TestSettingsPath:
    """Test settings file location."""

    def test_default_path_under_home(self, home):
        """Settings live in ~/.qianliclaw/settings.json."""
        assert default_settings_path() == home / ".qianliclaw" / "settings.json"

    def test_store_uses_default_path(self, settings_store, home):
        """Store resolves the default path at construction."""
        assert settings_store.settings_path == home / ".qianliclaw" / "settings.json"


class TestSettingsRead:
    """Test reading settings."""

    def test_missing_file_returns_defaults(self, settings_store):
        """Missing file yields an all-empty record."""
        assert settings_store.read() == AppSettings()

    def test_reads_camel_case_file(self, settings_store):
        """Persisted camelCase keys map onto the record."""
        settings_store.settings_path.parent.mkdir(parents=True)
        settings_store.settings_path.write_text(json.dumps({
            "configRootOverride": "~/alt",
            "gatewayUrl": "ws://127.0.0.1:18789",
        }))

        settings = settings_store.read()
        assert settings.config_root_override == "~/alt"
        assert settings.gateway_url == "ws://127.0.0.1:18789"
        assert settings.openclaw_cli_path is None

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '{"gatewayUrl": 42}', "", "[" * 100000])
    def test_unreadable_file_returns_defaults(self, settings_store, raw):
        """Corrupt or wrongly-shaped files never raise."""
        settings_store.settings_path.parent.mkdir(parents=True)
        settings_store.settings_path.write_text(raw)
        assert settings_store.read() == AppSettings()

    def test_overlong_path_returns_defaults(self, tmp_path):
        """A settings path the OS cannot open reads as defaults."""
        store = SettingsStore(tmp_path / ("s" * 300) / "settings.json")
        assert store.read() == AppSettings()

    def test_unknown_keys_ignored(self, settings_store):
        """Extra keys are dropped."""
        settings_store.settings_path.parent.mkdir(parents=True)
        settings_store.settings_path.write_text('{"theme": "dark", "openclawCliPath": "/bin/oc"}')
        assert settings_store.read() == AppSettings(openclaw_cli_path="/bin/oc")


class TestSettingsWrite:
    """Test writing settings."""

    def test_write_creates_directory(self, settings_store):
        """Write creates ~/.qianliclaw when missing."""
        error = settings_store.write(AppSettings(gateway_url="http://gw"))
        assert error is None
        assert settings_store.settings_path.exists()

    def test_write_is_pretty_camel_json(self, settings_store):
        """File is 2-space indented JSON with camelCase keys."""
        settings_store.write(AppSettings(openclaw_cli_path="/usr/bin/openclaw"))
        text = settings_store.settings_path.read_text()

        assert '\n  "openclawCliPath": "/usr/bin/openclaw"' in text
        assert json.loads(text)["openclawCliPath"] == "/usr/bin/openclaw"

    def test_round_trip(self, settings_store):
        """Written settings read back equal."""
        settings = AppSettings(
            config_root_override="/etc/openclaw",
            workspace_path_override="~/ws",
            openclaw_cli_path="C:\\Program Files\\openclaw.exe",
            gateway_url="ws://localhost:18789",
        )
        settings_store.write(settings)
        assert settings_store.read() == settings

    def test_write_failure_returns_message(self, tmp_path):
        """I/O failures come back as an error string."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = SettingsStore(blocker / "settings.json")

        error = store.write(AppSettings())
        assert isinstance(error, str)
        assert error


class TestMergeSettings:
    """Test partial settings updates."""

    def test_omitted_fields_keep_value(self):
        """Fields missing from the update are retained."""
        current = AppSettings(config_root_override="a", gateway_url="b")
        changes = AppSettings.model_validate({"gatewayUrl": "c"})

        merged = merge_settings(current, changes)
        assert merged.config_root_override == "a"
        assert merged.gateway_url == "c"

    def test_explicit_null_overwrites(self):
        """Explicit null clears a field."""
        current = AppSettings(config_root_override="a", gateway_url="b")
        changes = AppSettings.model_validate({"configRootOverride": None})

        merged = merge_settings(current, changes)
        assert merged.config_root_override is None
        assert merged.gateway_url == "b"

    def test_empty_update_is_noop(self):
        """An empty update returns the same values."""
        current = AppSettings(openclaw_cli_path="/bin/oc")
        assert merge_settings(current, AppSettings()) == current

    def test_snake_case_update(self):
        """Updates built in Python by field name merge the same way."""
        current = AppSettings(gateway_url="b")
        merged = merge_settings(current, AppSettings(workspace_path_override="/ws"))
        assert merged == AppSettings(gateway_url="b", workspace_path_override="/ws")
