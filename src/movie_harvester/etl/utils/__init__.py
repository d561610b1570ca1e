"""ETL utilities package: logging and JSON field accessors."""

from movie_harvester.etl.utils.logger import configure_logging, setup_logger

__all__ = ["configure_logging", "setup_logger"]
