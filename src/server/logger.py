"""Structured query logging (timestamp, IP, etc.)."""

import logging
import logging.handlers
from pathlib import Path
from typing import Union

LOG_FILE_PATH = Path(__file__).parent.parent.parent / "logs/server.log"
_LOG_LEVEL = logging.INFO

_file_handler: Union[logging.Handler, None] = None


def setup_logging(
    log_file_path: Path = LOG_FILE_PATH,
    level: int = _LOG_LEVEL,
) -> None:
    """Route the root logger to a rotating log file.

    Any handler already attached to the root logger is removed first.

    Args:
        log_file_path (Path): The file the records are written to.
        level (int): The minimum level of the records kept.

    """
    global _file_handler

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    formatter = logging.Formatter(
        "level=%(levelname)s | time=%(asctime)s | process=%(process)d | "
        "thread=%(thread)d | module=%(module)s | funcName=%(funcName)s | "
        "lineno=%(lineno)d | message=%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)
    _file_handler = file_handler

    print(f"[LOGGER] Writing log records to {log_file_path}")


def stop_logging() -> None:
    """Flush and detach the handler installed by setup_logging().

    Safe to call when logging was never set up.
    """
    global _file_handler
    if _file_handler is None:
        return

    logging.getLogger().removeHandler(_file_handler)
    _file_handler.flush()
    _file_handler.close()
    _file_handler = None


def log(
    time_stamp: str,
    client_ip: str,
    query: str,
    execution_time_ms: float,
) -> None:
    """Log the details of a query execution using the configured
    logging system.

    Args:
        time_stamp (str): The timestamp of the query execution.
        client_ip (str): The IP address of the client.
        query (str): The query string.
        execution_time_ms (float): The execution time in milliseconds.

    """
    logging.info(
        "Timestamp: %s, Client IP: %s, Query: '%s', Execution Time: %.2f ms",
        time_stamp,
        client_ip,
        query,
        execution_time_ms,
    )
