"""Tests for settings and the persisted config store."""
import json

import pytest


class TestConfigStore:
    """Tests for ConfigStore."""

    def test_defaults_without_file(self, config_store):
        assert config_store.api_key is None
        assert config_store.workspace_id is None
        assert config_store.billable_by_default is False
        assert not config_store.path.exists()

    def test_set_persists_camel_case_json(self, tmp_path):
        from clockify_cli.config import ConfigStore

        path = tmp_path / "nested" / "config.json"
        store = ConfigStore(path)

        store.set("workspace_id", "ws-1")
        store.set("billable_by_default", True)

        assert json.loads(path.read_text()) == {"workspaceId": "ws-1", "billableByDefault": True}
        assert path.stat().st_mode & 0o777 == 0o600

    def test_reload_from_disk(self, tmp_path):
        from clockify_cli.config import ConfigStore

        path = tmp_path / "config.json"
        path.write_text(json.dumps({"apiKey": "key-1", "workspaceId": "ws-1"}))

        store = ConfigStore(path)

        assert store.api_key == "key-1"
        assert store.workspace_id == "ws-1"

    def test_unset_restores_default(self, config_store):
        config_store.set("api_key", "key-1")

        config_store.unset("api_key")

        assert config_store.api_key is None

    def test_unknown_key_rejected(self, config_store):
        with pytest.raises(KeyError):
            config_store.set("colour", "red")

    def test_corrupt_file(self, tmp_path):
        from clockify_cli.config import ConfigStore
        from clockify_cli.errors import ClockifyError

        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ClockifyError, match="Invalid config file"):
            ConfigStore(path)

    def test_environment_key_preferred(self, tmp_path):
        from clockify_cli.config import ConfigStore

        store = ConfigStore(tmp_path / "config.json", env_api_key="env-key")
        store.set("api_key", "stored-key")

        assert store.api_key == "env-key"


class TestSettings:
    """Tests for Settings."""

    def test_environment_prefix(self, monkeypatch, tmp_path):
        from clockify_cli.config import Settings

        monkeypatch.setenv("CLOCKIFY_API_URL", "https://example.test/api/v1")
        monkeypatch.setenv("CLOCKIFY_CONFIG_FILE", str(tmp_path / "c.json"))
        monkeypatch.setenv("CLOCKIFY_TIMEOUT", "5")

        settings = Settings(_env_file=None)

        assert settings.api_url == "https://example.test/api/v1"
        assert settings.config_file == tmp_path / "c.json"
        assert settings.timeout == 5.0

    def test_store_from_settings(self, monkeypatch, tmp_path):
        from clockify_cli.config import ConfigStore, Settings

        monkeypatch.setenv("CLOCKIFY_API_KEY", "env-key")
        settings = Settings(_env_file=None, config_file=tmp_path / "c.json")

        store = ConfigStore.from_settings(settings)

        assert store.has_api_key()
        assert store.path == tmp_path / "c.json"


class TestSanitizeInput:
    """Tests for sanitize_input function."""

    def test_strips_control_characters(self):
        from clockify_cli.utils.sanitize import sanitize_input

        assert sanitize_input("Fix\x00 bug\x1b") == "Fix bug"
        assert sanitize_input("  padded\r\n") == "padded"

    def test_keeps_unicode(self):
        from clockify_cli.utils.sanitize import sanitize_input

        assert sanitize_input("Café → review") == "Café → review"
