"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings and a container built around fakes
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings, container=container)

Run with: uvicorn backend.main:create_app --factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import sentry_sdk
from fastapi import FastAPI

from backend.container import SyncContainer, build_container
from backend.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[SyncContainer] = None,
) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.
        container: Optional pre-built SyncContainer. If not provided, one is
                   built from settings.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    _init_sentry(settings)

    if container is None:
        container = build_container(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container.scheduler.start()
        logger.info("Sync ticker started")
        try:
            yield
        finally:
            await container.scheduler.stop()
            logger.info("Sync ticker stopped")

    app = FastAPI(
        title="Workout Sync Engine",
        description="Trigger surface for the on-device workout sync engine",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container

    _include_routers(app)

    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
        )
        logger.info("Sentry initialized for sync engine")


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import health_router, sync_router

    # Health router (no prefix - /health at root)
    app.include_router(health_router)
    app.include_router(sync_router)
