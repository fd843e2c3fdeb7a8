"""
Unit tests for backend/settings.py
"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from backend.settings import Settings, get_settings
from domain.models import SyncFamily


# Environment variables that CI might set which we need to clear for default tests
CI_ENV_VARS = [
    "ENVIRONMENT",
    "LOG_LEVEL",
    "ATHLETE_ID",
    "API_BASE_URL",
    "API_TOKEN",
    "LOCAL_STORE_PATH",
    "RETRY_DELAY_SECONDS",
    "SENTRY_DSN",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear CI environment variables to test true defaults."""
    for var in CI_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.mark.unit
class TestSettingsDefaults:
    """Test that Settings applies correct defaults."""

    def test_environment_default(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.environment == "development"
        assert settings.is_development is True

    def test_remote_store_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.api_base_url == "http://localhost:3000"
        assert settings.api_token is None
        assert settings.api_timeout_seconds == 30.0
        assert settings.session_page_size == 50

    def test_sync_policy_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.retry_delay_seconds == 30.0
        assert settings.athlete_id == ""
        assert settings.sentry_dsn is None

    def test_default_thresholds(self, clean_env):
        thresholds = Settings(_env_file=None).sync_thresholds()

        assert thresholds[SyncFamily.SESSIONS] == timedelta(hours=4)
        assert thresholds[SyncFamily.TEMPLATES] == timedelta(minutes=10)
        assert thresholds[SyncFamily.PERSONAL_BESTS] == timedelta(hours=4)
        assert thresholds[SyncFamily.CATALOG] == timedelta(hours=2)


@pytest.mark.unit
class TestSettingsFromEnvironment:
    """Test that environment variables are read."""

    def test_reads_env_vars(self, clean_env, monkeypatch):
        monkeypatch.setenv("ATHLETE_ID", "firebase-uid-1")
        monkeypatch.setenv("RETRY_DELAY_SECONDS", "5")
        monkeypatch.setenv("TEMPLATES_SYNC_THRESHOLD_SECONDS", "60")

        settings = Settings(_env_file=None)

        assert settings.athlete_id == "firebase-uid-1"
        assert settings.retry_delay_seconds == 5
        assert settings.sync_thresholds()[SyncFamily.TEMPLATES] == timedelta(seconds=60)

    def test_case_insensitive(self, clean_env, monkeypatch):
        monkeypatch.setenv("api_base_url", "https://store.example.com")

        assert Settings(_env_file=None).api_base_url == "https://store.example.com"


@pytest.mark.unit
class TestSettingsValidation:
    def test_environment_is_normalized(self):
        settings = Settings(environment="PRODUCTION", _env_file=None)
        assert settings.environment == "production"
        assert settings.is_production is True

    def test_invalid_environment_rejected(self):
        with pytest.raises(ValidationError):
            Settings(environment="qa", _env_file=None)

    def test_log_level_is_uppercased(self):
        assert Settings(log_level="debug", _env_file=None).log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="chatty", _env_file=None)

    def test_negative_retry_delay_rejected(self):
        with pytest.raises(ValidationError):
            Settings(retry_delay_seconds=-1, _env_file=None)

    def test_page_size_bounds(self):
        with pytest.raises(ValidationError):
            Settings(session_page_size=0, _env_file=None)

    def test_test_environment(self):
        assert Settings(environment="test", _env_file=None).is_test is True


@pytest.mark.unit
class TestGetSettings:
    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
