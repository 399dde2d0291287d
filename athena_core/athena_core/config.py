"""Core configuration loaded from environment variables."""

from __future__ import annotations

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from athena_core.models.execution import DEFAULT_CATALOG

logger = logging.getLogger(__name__)

_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables with ATHENAQUERY_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="ATHENAQUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # AWS
    region: str | None = None
    profile: str | None = None

    # Scope
    work_group: str | None = None
    database: str | None = None
    catalog: str = DEFAULT_CATALOG
    output_location: str | None = None

    # Polling
    poll_interval: float = Field(default=2.0, gt=0.0)
    query_timeout_seconds: float | None = Field(default=None, gt=0.0)
    max_poll_attempts: int | None = Field(default=None, ge=1)

    # Logging
    log_level: str = "WARNING"
    structured_logging: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        level = str(v).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level '{v}'")
        return level


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing.

    ``None`` overrides are dropped so that unset command-line options do not
    mask environment values.
    """
    settings = Settings(**{k: v for k, v in overrides.items() if v is not None})  # type: ignore[arg-type]
    logger.debug(
        "Loaded settings: region=%s work_group=%s database=%s",
        settings.region,
        settings.work_group,
        settings.database,
    )
    return settings
