"""Base configuration settings.

Contains foundational settings for paths, logging, and the harvest pipeline.
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# =============================================================================
# LOGGING SETTINGS
# =============================================================================


class LoggingSettings(BaseSettings):
    """Logging configuration.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Log files directory.
    """

    level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: Path = Field(default=Path("logs"), alias="LOG_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid LOG_LEVEL. Valid: {valid_levels}")
        return v_upper


# =============================================================================
# PIPELINE SETTINGS
# =============================================================================


class PipelineSettings(BaseSettings):
    """Harvest pipeline configuration.

    Attributes:
        workers: Number of concurrent fetch workers.
        batch_size: Records per flushed batch file.
        flush_timeout: Seconds without a flush before a partial batch is written.
        work_queue_size: Capacity of the identifier queue.
        result_queue_size: Capacity of the normalized record queue.
        shutdown_timeout: Upper bound on the wait for the final flush.
        acquire_timeout: Optional upper bound on a single rate limiter wait.
        ids_file: JSON file listing the movie identifiers.
        output_dir: Directory receiving batch files.
        file_prefix: Batch file name prefix.
    """

    workers: int = Field(default=500, ge=1, alias="HARVEST_WORKERS")
    batch_size: int = Field(default=100, ge=1, alias="HARVEST_BATCH_SIZE")
    flush_timeout: float = Field(default=410.0, gt=0, alias="HARVEST_FLUSH_TIMEOUT")
    work_queue_size: int = Field(default=10_000, ge=1, alias="HARVEST_WORK_QUEUE_SIZE")
    result_queue_size: int = Field(default=1_000, ge=1, alias="HARVEST_RESULT_QUEUE_SIZE")
    shutdown_timeout: float = Field(default=600.0, gt=0, alias="HARVEST_SHUTDOWN_TIMEOUT")
    acquire_timeout: float | None = Field(default=None, gt=0, alias="HARVEST_ACQUIRE_TIMEOUT")
    ids_file: Path = Field(default=Path("movie_ids.json"), alias="HARVEST_IDS_FILE")
    output_dir: Path = Field(default=Path("data/processed"), alias="HARVEST_OUTPUT_DIR")
    file_prefix: str = Field(default="processed_movies", alias="HARVEST_FILE_PREFIX")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )
