from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from logging import Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "ingest.log"
LOGGER_NAMESPACE = "recentactivity"
LOG_FORMAT = "%(asctime)sZ %(levelname)s [%(data_source)s] %(name)s %(message)s"
NO_DATA_SOURCE = "-"


class UtcFormatter(logging.Formatter):
    """Formatter that renders timestamps in UTC using ISO-8601."""

    converter = time.gmtime

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if datefmt:
            return dt.strftime(datefmt)
        return dt.isoformat(timespec="seconds")


class DataSourceFilter(logging.Filter):
    """Stamp each record with the name of the data source being ingested."""

    def __init__(self, data_source: str = NO_DATA_SOURCE) -> None:
        super().__init__()
        self.data_source = data_source

    def filter(self, record: logging.LogRecord) -> bool:
        record.data_source = self.data_source
        return True


# Shared by every handler configure_logging() installs
_data_source_filter = DataSourceFilter()


def configure_logging(
    log_dir: Path,
    level: int | str = logging.INFO,
    *,
    file_name: str = LOG_FILE_NAME,
    max_mb: int = 50,
    backup_count: int = 10,
    console: bool = True,
) -> Logger:
    """
    Configure the application logger for one ingest run.

    Records go to a rotating file in the case's log folder and, unless
    disabled, to the console. Every line carries the current data source
    name (see set_log_data_source()), so runs over several images can share
    one log file.

    Args:
        log_dir: Directory for log files (created if missing)
        level: Logging level, numeric or name (default: INFO)
        file_name: Log file name inside log_dir
        max_mb: Maximum size per log file in MB before rotation
        backup_count: Number of rotated files to keep
        console: Also log to stderr

    Returns:
        Configured application logger
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / file_name
    _data_source_filter.data_source = NO_DATA_SOURCE

    formatter = UtcFormatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")

    app_logger = logging.getLogger(LOGGER_NAMESPACE)
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path,
            maxBytes=max_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(_data_source_filter)
        app_logger.addHandler(handler)

    app_logger.debug("Logging configured. File: %s (max %d MB, %d backups)",
                     log_path, max_mb, backup_count)
    return app_logger


def set_log_data_source(name: Optional[str]) -> None:
    """Set the data source name shown on subsequent log lines (None clears it)."""
    _data_source_filter.data_source = name or NO_DATA_SOURCE


def get_logger(name: Optional[str] = None) -> Logger:
    """Return a child logger under the application namespace."""
    base = logging.getLogger(LOGGER_NAMESPACE)
    if name:
        return base.getChild(name)
    return base
