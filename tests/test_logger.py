import logging
import logging.handlers

import pytest

from src.server import logger


@pytest.fixture
def log_file(tmp_path):
    """Install the file handler for one test and restore the root level."""
    root_logger = logging.getLogger()
    saved_level = root_logger.level

    path = tmp_path / "logs" / "server.log"
    logger.setup_logging(path)
    yield path

    logger.stop_logging()
    root_logger.setLevel(saved_level)


def file_handlers():
    return [
        handler
        for handler in logging.getLogger().handlers
        if isinstance(handler, logging.handlers.RotatingFileHandler)
    ]


def test_setup_logging_installs_rotating_handler(log_file):
    handlers = file_handlers()
    assert len(handlers) == 1
    assert handlers[0].baseFilename == str(log_file)
    assert log_file.parent.is_dir()


def test_log_writes_structured_record(log_file):
    logger.log("2026-01-01 10:00:00", "127.0.0.1", "SEARCH pizza", 1.234)
    logger.stop_logging()

    content = log_file.read_text(encoding="utf-8")
    assert "level=INFO" in content
    assert "funcName=log" in content
    assert (
        "Timestamp: 2026-01-01 10:00:00, Client IP: 127.0.0.1, "
        "Query: 'SEARCH pizza', Execution Time: 1.23 ms" in content
    )


def test_debug_records_are_filtered(log_file):
    logging.debug("hidden message")
    logging.warning("visible message")
    logger.stop_logging()

    content = log_file.read_text(encoding="utf-8")
    assert "hidden message" not in content
    assert "level=WARNING" in content


def test_stop_logging_removes_handler(log_file):
    logger.stop_logging()
    assert file_handlers() == []
    # A second call is a no-op
    logger.stop_logging()
