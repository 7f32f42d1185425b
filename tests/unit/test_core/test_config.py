"""
Unit tests for Config.
"""

import json

import pytest

from organizer.core.config import Config


class TestConfigFiles:
    """Tests for loading and creating the JSON config files."""

    def test_creates_default_files(self, tmp_path):
        """Missing files are created with defaults."""
        config = Config(tmp_path)

        assert (tmp_path / "settings.json").exists()
        assert (tmp_path / "preferences.json").exists()
        assert config.get("session_cookie_name") == "session_token"
        assert config.get("session_max_age_days") == 60
        assert config.get("focus_minutes", section="preferences") == 25
        assert config.get("break_minutes", section="preferences") == 5

    def test_existing_file_is_merged_with_defaults(self, tmp_path):
        """Keys missing from an older settings file fall back to defaults."""
        (tmp_path / "settings.json").write_text(json.dumps({"log_level": "DEBUG"}))

        config = Config(tmp_path)

        assert config.get("log_level") == "DEBUG"
        assert config.get("cli_user_id") == "local"

    def test_set_persists(self, tmp_path):
        config = Config(tmp_path)
        config.set("focus_minutes", 50, section="preferences")

        reloaded = Config(tmp_path)
        assert reloaded.get("focus_minutes", section="preferences") == 50

    def test_unknown_key_returns_default(self, tmp_path):
        config = Config(tmp_path)
        assert config.get("missing", default="fallback") == "fallback"
        assert config.get("missing", section="nope", default=1) == 1

    def test_env_config_dir(self, tmp_path, monkeypatch):
        """ORGANIZER_CONFIG_DIR is used when no directory is passed."""
        monkeypatch.setenv("ORGANIZER_CONFIG_DIR", str(tmp_path / "cfg"))
        config = Config()
        assert config.config_dir == tmp_path / "cfg"


class TestConfigValues:

    def test_relative_database_path_resolves_from_project_root(self, tmp_path):
        config = Config(tmp_path)
        path = config.get_database_path()
        assert path.is_absolute()
        assert path.parts[-3:] == ("data", "database", "organizer.db")

    def test_absolute_database_path_kept(self, tmp_path):
        config = Config(tmp_path)
        config.set("database_path", str(tmp_path / "db.sqlite"))
        assert config.get_database_path() == tmp_path / "db.sqlite"

    def test_cors_origins(self, tmp_path):
        config = Config(tmp_path)
        assert "http://localhost:5173" in config.get_cors_origins()

    def test_users_service_credentials_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("USERS_SERVICE_API_URL", "https://users.example")
        monkeypatch.setenv("USERS_SERVICE_API_KEY", "secret")
        config = Config(tmp_path)
        assert config.users_service_api_url == "https://users.example"
        assert config.users_service_api_key == "secret"


class TestEnvOverrides:

    def test_scalar_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ORGANIZER_LOG_LEVEL", "WARNING")
        assert Config(tmp_path).get("log_level") == "WARNING"

    def test_list_override_is_comma_separated(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ORGANIZER_CORS_ORIGINS", "https://a.example, https://b.example")
        assert Config(tmp_path).get_cors_origins() == ["https://a.example", "https://b.example"]

    def test_override_not_written_to_disk(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ORGANIZER_LOG_LEVEL", "WARNING")
        Config(tmp_path)
        stored = json.loads((tmp_path / "settings.json").read_text())
        assert stored["log_level"] == "INFO"

    def test_preferences_are_not_overridable(self, tmp_path, monkeypatch):
        monkeypatch.setenv("ORGANIZER_FOCUS_MINUTES", "90")
        assert Config(tmp_path).get("focus_minutes", section="preferences") == 25


def test_set_unknown_section_raises(tmp_path):
    with pytest.raises(ValueError):
        Config(tmp_path).set("x", 1, section="bogus")
