"""
Unit tests for backend/main.py
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from unittest.mock import patch

from backend.main import create_app, _init_sentry
from backend.settings import Settings
from tests.fakes import create_sync_container, create_test_settings


@pytest.fixture
def settings():
    return create_test_settings()


@pytest.fixture
def container(settings):
    return create_sync_container(settings=settings)


@pytest.mark.unit
class TestCreateApp:
    """Test the create_app() factory function."""

    def test_create_app_returns_fastapi_instance(self, settings, container):
        app = create_app(settings=settings, container=container)
        assert isinstance(app, FastAPI)

    def test_create_app_uses_default_settings_when_none_provided(self, settings, container):
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_get_settings.return_value = settings

            app = create_app(settings=None, container=container)

            mock_get_settings.assert_called_once()
            assert app.state.settings is settings

    def test_create_app_builds_container_when_none_provided(self):
        settings = Settings(environment="test", local_store_path=":memory:", _env_file=None)

        app = create_app(settings=settings)

        assert app.state.container.settings is settings

    def test_create_app_configures_app_metadata(self, settings, container):
        app = create_app(settings=settings, container=container)

        assert app.title == "Workout Sync Engine"
        assert app.version == "1.0.0"

    def test_routes_registered(self, settings, container):
        app = create_app(settings=settings, container=container)
        paths = {route.path for route in app.routes}

        assert "/health" in paths
        assert "/sync/status" in paths
        assert "/sync/{family}" in paths


@pytest.mark.unit
class TestLifespan:
    def test_ticker_runs_while_app_is_up(self, settings, container):
        app = create_app(settings=settings, container=container)

        with TestClient(app) as client:
            assert container.scheduler.ticker.running is True
            assert client.get("/health").json() == {"status": "ok", "environment": "test"}

        assert container.scheduler.ticker.running is False


@pytest.mark.unit
class TestInitSentry:
    """Test Sentry initialization."""

    def test_init_sentry_skipped_when_no_dsn(self):
        settings = Settings(sentry_dsn=None, _env_file=None)

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_not_called()

    def test_init_sentry_called_when_dsn_provided(self):
        settings = Settings(
            sentry_dsn="https://test@sentry.io/123",
            environment="test",
            _env_file=None,
        )

        with patch("backend.main.sentry_sdk.init") as mock_init:
            _init_sentry(settings)
            mock_init.assert_called_once_with(
                dsn="https://test@sentry.io/123",
                environment="test",
                traces_sample_rate=0.1,
            )
