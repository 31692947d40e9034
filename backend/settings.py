"""
Settings for the workout logger CLI and the sandbox workouts API.

Values come from environment variables (or a .env file) and are validated
on load. The CLI and create_app() build one Settings and pass it down;
nothing reads the environment after that.

Usage:
    from backend.settings import get_settings

    settings = get_settings()
    engine_config = EngineConfig.from_settings(settings)
    client = WorkoutAPIClient(settings.workout_api_url)
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Workout logger settings, one field per environment variable."""

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
        description="Runtime environment: development, staging, production",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level for the CLI and API",
    )

    # -------------------------------------------------------------------------
    # Workouts API (submission transport)
    # -------------------------------------------------------------------------
    workout_api_url: str = Field(
        default="http://localhost:8001",
        description="Base URL of the workouts API",
    )
    workout_api_token: Optional[str] = Field(
        default=None,
        description="Bearer token sent to the workouts API",
    )
    workout_api_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout for the workouts API in seconds",
    )

    # -------------------------------------------------------------------------
    # Local Drafts
    # -------------------------------------------------------------------------
    draft_dir: Path = Field(
        default=Path.home() / ".workout-logger" / "drafts",
        description="Directory holding local session drafts",
    )
    draft_save_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Quiet period before an edit is written to the draft",
    )

    # -------------------------------------------------------------------------
    # Sandbox API
    # -------------------------------------------------------------------------
    sandbox_seed_file: Optional[Path] = Field(
        default=None,
        description="JSON file with templates to seed the sandbox workouts API",
    )
    sandbox_user_id: str = Field(
        default="sandbox-user",
        min_length=1,
        description="User the sandbox API acts as when no X-User-Id header is sent",
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
        """Lower-case and check the environment name."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Must be one of: {valid_levels}")
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


@lru_cache
def get_settings() -> Settings:
    """Settings loaded once per process; tests reset it with get_settings.cache_clear()."""
    return Settings()
