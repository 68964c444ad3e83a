"""Tests for core.settings module.

Covers:
- FaultlineSettings defaults
- FAULTLINE_* environment overrides
- Validation of log levels
- get_settings caching and reset
"""

import pytest
from pydantic import ValidationError

from faultline.core.settings import (
    FaultlineSettings,
    get_settings,
    reset_settings,
    resolve_setting,
)


class TestFaultlineSettingsDefaults:
    def test_defaults(self):
        s = FaultlineSettings()
        assert s.log_level == "INFO"
        assert s.json_logs is None
        assert s.capture_location is True
        assert s.thread_name_prefix == "faultline"


class TestFaultlineSettingsEnvOverride:
    def test_log_level_from_env_is_normalised(self, monkeypatch):
        monkeypatch.setenv("FAULTLINE_LOG_LEVEL", "debug")
        assert FaultlineSettings().log_level == "DEBUG"

    def test_json_logs_from_env(self, monkeypatch):
        monkeypatch.setenv("FAULTLINE_JSON_LOGS", "true")
        assert FaultlineSettings().json_logs is True

    def test_capture_location_from_env(self, monkeypatch):
        monkeypatch.setenv("FAULTLINE_CAPTURE_LOCATION", "0")
        assert FaultlineSettings().capture_location is False

    def test_thread_name_prefix_from_env(self, monkeypatch):
        monkeypatch.setenv("FAULTLINE_THREAD_NAME_PREFIX", "jobs")
        assert FaultlineSettings().thread_name_prefix == "jobs"

    def test_unprefixed_vars_ignored(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert FaultlineSettings().log_level == "INFO"


class TestFaultlineSettingsValidation:
    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            FaultlineSettings(log_level="LOUD")

    def test_empty_thread_prefix_rejected(self):
        with pytest.raises(ValidationError):
            FaultlineSettings(thread_name_prefix="")


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_reset_rereads_environment(self, monkeypatch):
        assert get_settings().thread_name_prefix == "faultline"
        monkeypatch.setenv("FAULTLINE_THREAD_NAME_PREFIX", "reloaded")
        assert get_settings().thread_name_prefix == "faultline"
        reset_settings()
        assert get_settings().thread_name_prefix == "reloaded"


class TestResolveSetting:
    def test_reads_loaded_settings(self, monkeypatch):
        monkeypatch.setenv("FAULTLINE_CAPTURE_LOCATION", "false")
        assert resolve_setting("capture_location") is False

    def test_invalid_environment_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("FAULTLINE_LOG_LEVEL", "verbose")
        monkeypatch.setenv("FAULTLINE_THREAD_NAME_PREFIX", "custom")
        with pytest.raises(ValidationError):
            get_settings()
        assert resolve_setting("capture_location") is True
        assert resolve_setting("thread_name_prefix") == "faultline"
