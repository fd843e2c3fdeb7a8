"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from backend.settings import get_settings, Settings

    # In FastAPI endpoints (dependency injection)
    @app.get("/")
    def read_root(settings: Settings = Depends(get_settings)):
        return {"environment": settings.environment}

    # Direct access (module-level)
    settings = get_settings()
    print(settings.api_base_url)
"""

from datetime import timedelta
from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from domain.models import SyncFamily


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production, test",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level for the CLI and server",
    )

    # -------------------------------------------------------------------------
    # Athlete
    # -------------------------------------------------------------------------
    athlete_id: str = Field(
        default="",
        description="Remote identifier of the athlete whose data is mirrored",
    )

    # -------------------------------------------------------------------------
    # Remote Store
    # -------------------------------------------------------------------------
    api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the remote workout store",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent to the remote store",
    )
    api_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )
    session_page_size: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Sessions fetched per page when listing",
    )

    # -------------------------------------------------------------------------
    # Local Store
    # -------------------------------------------------------------------------
    local_store_path: str = Field(
        default="~/.workout-sync/cache.db",
        description="SQLite file for the on-device cache (':memory:' for tests)",
    )

    # -------------------------------------------------------------------------
    # Sync Policy
    # -------------------------------------------------------------------------
    retry_delay_seconds: float = Field(
        default=30.0,
        ge=0,
        description="Delay before the single retry of a failed pass",
    )
    sessions_sync_threshold_seconds: int = Field(
        default=4 * 3600,
        ge=0,
        description="Staleness threshold for sessions",
    )
    templates_sync_threshold_seconds: int = Field(
        default=600,
        ge=0,
        description="Staleness threshold for templates",
    )
    personal_bests_sync_threshold_seconds: int = Field(
        default=4 * 3600,
        ge=0,
        description="Staleness threshold for personal bests",
    )
    catalog_sync_threshold_seconds: int = Field(
        default=2 * 3600,
        ge=0,
        description="Staleness threshold for the exercise catalog",
    )
    sync_tick_interval_seconds: float = Field(
        default=4 * 3600,
        gt=0,
        description="Interval of the periodic sync_if_needed tick",
    )
    exercise_match_threshold: float = Field(
        default=0.85,
        ge=0,
        le=1,
        description="Minimum confidence for catalog name matches",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return v.upper()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"

    def sync_thresholds(self) -> Dict[SyncFamily, timedelta]:
        """Staleness threshold per family."""
        return {
            SyncFamily.SESSIONS: timedelta(seconds=self.sessions_sync_threshold_seconds),
            SyncFamily.TEMPLATES: timedelta(seconds=self.templates_sync_threshold_seconds),
            SyncFamily.PERSONAL_BESTS: timedelta(seconds=self.personal_bests_sync_threshold_seconds),
            SyncFamily.CATALOG: timedelta(seconds=self.catalog_sync_threshold_seconds),
        }


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
