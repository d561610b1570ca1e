"""Centralized configuration for the movie harvester.

Configuration strategy:
- CRITICAL settings (TMDB access token): no usable default. The CLI refuses
  to start when the token is missing.
- INFRASTRUCTURE settings (logging, pipeline sizing, rate limits): safe
  defaults, overridable via environment or .env.

Usage:
    from movie_harvester.settings import get_settings

    settings = get_settings()
    settings.tmdb.requests_per_second
    settings.pipeline.batch_size
"""

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from movie_harvester.settings.base import LoggingSettings, PipelineSettings
from movie_harvester.settings.tmdb import TMDBSettings

__all__ = [
    "Settings",
    "get_settings",
    "LoggingSettings",
    "PipelineSettings",
    "TMDBSettings",
    "get_masked_settings",
]


# =============================================================================
# GLOBAL SETTINGS
# =============================================================================


class Settings(BaseSettings):
    """Global application settings.

    Aggregates all configuration sections into a single object.
    """

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    tmdb: TMDBSettings = Field(default_factory=TMDBSettings)
    pipeline: PipelineSettings = Field(default_factory=PipelineSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# =============================================================================
# CACHED INSTANCE
# =============================================================================


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once; raises pydantic.ValidationError on invalid values."""
    return Settings()


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_masked_settings(config: Settings | None = None) -> dict[str, Any]:
    """Return settings dict with sensitive values masked.

    Args:
        config: Settings to dump. Defaults to the cached settings.

    Returns:
        Configuration dictionary safe for logging.
    """
    dumped = (config or get_settings()).model_dump(mode="json")
    if dumped["tmdb"].get("access_token"):
        dumped["tmdb"]["access_token"] = "***MASKED***"
    return dumped
