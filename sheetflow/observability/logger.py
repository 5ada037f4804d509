"""
Structured logging for sheetflow

Every module logger lives below the "sheetflow" logger, which owns the only
handler. setup_logger() (re)configures that handler for JSON lines
(python-json-logger) or plain text, so a CLI run and a test can each route
pipeline output where they need it.
"""
import logging
import os
import sys
import time
from typing import TextIO

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "sheetflow"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMATS = ("json", "text")

JSON_FIELDS = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter emitting one object per line.

    Standard keys: timestamp, level, logger, module, function, thread_name.
    Anything passed through ``extra`` (entity, record_id, row_number,
    violations, ...) is merged in as top-level keys.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["thread_name"] = record.threadName


def _formatter(format_type: str) -> logging.Formatter:
    if format_type == "text":
        return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    return CustomJsonFormatter(fmt=JSON_FIELDS, datefmt="%Y-%m-%dT%H:%M:%S")


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure a logger with a single stream handler.

    Args:
        name: Logger name (the "sheetflow" logger unless a test needs its own)
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; falls back to LOG_LEVEL, then INFO
        format_type: "json" or "text"; falls back to LOG_FORMAT, then json
        stream: Destination stream (stdout when None)

    Returns:
        The configured logger, which no longer propagates to the root logger
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_level = LOG_LEVELS.get(level_name, logging.INFO)
    format_type = (format_type or os.getenv("LOG_FORMAT") or "json").lower()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(_formatter(format_type))

    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Return a logger below the "sheetflow" logger.

    The "sheetflow" logger gets its default handler on first use.

    Args:
        name: Logger name, usually __name__
    """
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        setup_logger(ROOT_LOGGER_NAME)
    return logging.getLogger(name)


class log_operation:
    """
    Context manager timing one operation (typically a pipeline stage).

    Logs "Starting: <name>" on entry and "Completed: <name>" or
    "Failed: <name>" on exit. ``duration`` holds the elapsed seconds after the
    block exits, also when it raised. Exceptions are never suppressed.

    Usage:
        with log_operation("read records", logger, entity="event") as op:
            records = source.read_all()
        timings["reading"] = op.duration
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.duration: float = 0.0
        self._started = 0.0

    def _fields(self, **fields) -> dict:
        return {"operation": self.operation_name, **fields, **self.extra_fields}

    def __enter__(self):
        self._started = time.perf_counter()
        self.logger.info(f"Starting: {self.operation_name}", extra=self._fields())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = time.perf_counter() - self._started
        elapsed = round(self.duration, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra=self._fields(duration_seconds=elapsed, status="success"),
            )
            return False

        self.logger.error(
            f"Failed: {self.operation_name}",
            extra=self._fields(
                duration_seconds=elapsed,
                status="error",
                error_type=exc_type.__name__,
                error_message=str(exc_val),
            ),
            exc_info=(exc_type, exc_val, exc_tb),
        )
        return False
