"""Harvest logging configuration with file and console handlers.

Every module logs through ``logging.getLogger(__name__)``; the CLI calls
:func:`configure_logging` once so those loggers propagate into a single
configured ``movie_harvester`` logger.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from movie_harvester.settings import LoggingSettings

ROOT_LOGGER_NAME = "movie_harvester"

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s"
_LOG_DATE_FORMAT = "%H:%M:%S"
_LOGGERS_CACHE: dict[str, logging.Logger] = {}

# httpx logs one INFO line per request, far too chatty for millions of fetches
_NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logger(
    name: str,
    level: int | str = logging.INFO,
    log_dir: Path | None = None,
    to_file: bool = True,
) -> logging.Logger:
    """Configure and return a logger with console and optional file handlers.

    Args:
        name: Logger name (e.g., 'movie_harvester').
        level: Logging level (default INFO).
        log_dir: Directory for log files. If None, uses 'logs/'.
        to_file: Whether to attach a dated file handler.

    Returns:
        Configured logger instance, cached per name.
    """
    if name in _LOGGERS_CACHE:
        return _LOGGERS_CACHE[name]

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(_LOG_FORMAT, _LOG_DATE_FORMAT)
    logger.addHandler(_create_console_handler(formatter, level))

    if to_file:
        file_handler = _create_file_handler(name, formatter, level, log_dir)
        if file_handler:
            logger.addHandler(file_handler)

    _LOGGERS_CACHE[name] = logger
    return logger


def configure_logging(logging_settings: LoggingSettings, to_file: bool = True) -> logging.Logger:
    """Configure the package logger from settings and quiet HTTP libraries."""
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
    return setup_logger(
        ROOT_LOGGER_NAME,
        level=logging_settings.level,
        log_dir=logging_settings.log_dir,
        to_file=to_file,
    )


def _create_console_handler(
    formatter: logging.Formatter,
    level: int | str,
) -> logging.StreamHandler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _create_file_handler(
    name: str,
    formatter: logging.Formatter,
    level: int | str,
    log_dir: Path | None,
) -> logging.FileHandler | None:
    """Create a dated file handler.

    Returns:
        Configured FileHandler, or None when the log directory is unusable.
    """
    try:
        handler = logging.FileHandler(_get_log_file_path(name, log_dir), encoding="utf-8")
    except OSError as e:
        print(f"Warning: Could not create log file: {e}", file=sys.stderr)
        return None
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _get_log_file_path(name: str, log_dir: Path | None) -> Path:
    """Build ``<log_dir>/<name>_<YYYYmmdd>.log``, creating the directory."""
    if log_dir is None:
        log_dir = Path("logs")

    log_dir.mkdir(parents=True, exist_ok=True)

    safe_name = name.replace(".", "_").replace("/", "_")
    date_suffix = datetime.now().strftime("%Y%m%d")
    return log_dir / f"{safe_name}_{date_suffix}.log"
