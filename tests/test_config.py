"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from formguard.config import DEFAULT_FIELD_MAX_LENGTHS, Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("FG_API_KEY", raising=False)
        settings = Settings()
        assert settings.app_name == "FormGuard"
        assert settings.field_max_lengths == DEFAULT_FIELD_MAX_LENGTHS
        assert settings.rate_limit_max_submissions == 5
        assert settings.rate_limit_window_seconds == 60.0
        assert settings.names_database_enabled is True

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FG_RATE_LIMIT_MAX_SUBMISSIONS", "3")
        monkeypatch.setenv("FG_LOG_LEVEL", "DEBUG")
        settings = Settings()
        assert settings.rate_limit_max_submissions == 3
        assert settings.log_level == "debug"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="loud")

    def test_field_caps_are_merged(self):
        settings = Settings(field_max_lengths={"Message": 200, "phone": 20})
        assert settings.field_max_lengths == {
            "name": 100,
            "email": 255,
            "message": 200,
            "phone": 20,
        }

    def test_non_positive_cap_rejected(self):
        with pytest.raises(ValidationError):
            Settings(field_max_lengths={"name": 0})

    def test_rate_limit_bounds(self):
        with pytest.raises(ValidationError):
            Settings(rate_limit_max_submissions=0)
        with pytest.raises(ValidationError):
            Settings(rate_limit_window_seconds=0)


class TestYamlLoading:
    def test_from_yaml(self, tmp_path):
        path = tmp_path / "formguard.yaml"
        path.write_text(
            "rate_limit_max_submissions: 2\n"
            "names_database_enabled: false\n"
            "field_max_lengths:\n"
            "  name: 40\n"
        )
        settings = Settings.from_yaml(path)
        assert settings.rate_limit_max_submissions == 2
        assert settings.names_database_enabled is False
        assert settings.field_max_lengths["name"] == 40
        assert settings.field_max_lengths["email"] == 255

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = Settings.from_yaml(tmp_path / "absent.yaml")
        assert settings.rate_limit_max_submissions == 5

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- one\n- two\n")
        assert Settings.from_yaml(path).app_name == "FormGuard"

    def test_get_settings_with_path(self, tmp_path):
        path = tmp_path / "formguard.yaml"
        path.write_text("port: 9001\n")
        assert get_settings(path).port == 9001

    def test_bundled_default_config(self):
        settings = Settings.from_yaml()
        assert settings.field_max_lengths == DEFAULT_FIELD_MAX_LENGTHS
