"""Tests for core.logging."""

import logging

import pytest

from core.logging import (
    LOG_FILE_NAME,
    LOGGER_NAMESPACE,
    configure_logging,
    get_logger,
    set_log_data_source,
)


@pytest.fixture()
def app_logger():
    yield logging.getLogger(LOGGER_NAMESPACE)
    logger = logging.getLogger(LOGGER_NAMESPACE)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    set_log_data_source(None)


def _flush(logger):
    for handler in logger.handlers:
        handler.flush()


def test_get_logger_is_namespaced():
    assert get_logger("core.lifecycle").name == f"{LOGGER_NAMESPACE}.core.lifecycle"
    assert get_logger().name == LOGGER_NAMESPACE


def test_configure_logging_writes_file(tmp_path, app_logger):
    logger = configure_logging(tmp_path / "logs", level="DEBUG", max_mb=1, backup_count=1)
    get_logger("test").info("hello %s", "world")
    _flush(logger)

    content = (tmp_path / "logs" / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "hello world" in content
    assert "Z INFO [-] recentactivity.test" in content
    assert len(logger.handlers) == 2


def test_data_source_and_file_name(tmp_path, app_logger):
    logger = configure_logging(tmp_path, file_name="case42.log", console=False)
    get_logger("test").info("before")
    set_log_data_source("image1")
    get_logger("test").warning("after")
    _flush(logger)

    lines = (tmp_path / "case42.log").read_text(encoding="utf-8").splitlines()
    assert lines[0].endswith("INFO [-] recentactivity.test before")
    assert lines[1].endswith("WARNING [image1] recentactivity.test after")
    assert len(logger.handlers) == 1
    assert not (tmp_path / LOG_FILE_NAME).exists()


def test_level_filters_records(tmp_path, app_logger):
    logger = configure_logging(tmp_path, level="WARNING", console=False)
    get_logger("test").info("quiet")
    _flush(logger)

    assert "quiet" not in (tmp_path / LOG_FILE_NAME).read_text(encoding="utf-8")
