"""
Structured logging for admitguard.

Log records are rendered as JSON through python-json-logger (or as plain
text for local use) and written to stderr, leaving stdout to the CLI.
Candidate identifiers passed through ``extra`` are masked before a record
is rendered, so an Aadhaar or phone number never reaches a log sink in full.

Environment:
    LOG_LEVEL   DEBUG, INFO (default), WARNING, ERROR or CRITICAL
    LOG_FORMAT  json (default) or text
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "admitguard"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Extra keys whose values identify a candidate
SENSITIVE_FIELDS = frozenset({"aadhaar", "phone", "email", "dob"})


def mask_value(value) -> str:
    """
    Hide all but the last four characters of a value.

    Examples:
        >>> mask_value("123456789012")
        '********9012'
        >>> mask_value("abc")
        '***'
    """
    text = str(value)
    if len(text) <= 4:
        return "*" * len(text)
    return "*" * (len(text) - 4) + text[-4:]


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter for intake events.

    Every record carries timestamp, level, logger, module, function and
    service. Values of SENSITIVE_FIELDS are masked.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName
        log_record["service"] = SERVICE_NAME

        for key in SENSITIVE_FIELDS.intersection(log_record):
            if log_record[key]:
                log_record[key] = mask_value(log_record[key])


def _resolve_level(level: str | None) -> int:
    name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    return LOG_LEVELS.get(name, logging.INFO)


def _build_formatter(format_type: str | None) -> logging.Formatter:
    format_type = (format_type or os.getenv("LOG_FORMAT", "json")).lower()
    if format_type == "json":
        return CustomJsonFormatter(JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logger(
    name: str = SERVICE_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Configure a logger with a single stderr handler.

    Args:
        name: Logger name
        level: Log level name; defaults to LOG_LEVEL
        format_type: "json" or "text"; defaults to LOG_FORMAT

    Returns:
        Configured logger instance
    """
    log_level = _resolve_level(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(_build_formatter(format_type))

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = SERVICE_NAME) -> logging.Logger:
    """Return the named logger, configuring it on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name)
    return logger


class log_operation:
    """
    Context manager that logs the start, outcome and duration of an operation.

    Usage:
        with log_operation("Submitting intake form", logger=logger, exception_count=2):
            recorder.record(submission)
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time = None

    def _extra(self, **fields) -> dict:
        return {"operation": self.operation_name, **fields, **self.extra_fields}

    def __enter__(self):
        self.start_time = time.monotonic()
        self.logger.debug(f"Starting: {self.operation_name}", extra=self._extra())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = round(time.monotonic() - self.start_time, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra=self._extra(duration_seconds=duration, status="success"),
            )
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra=self._extra(
                    duration_seconds=duration,
                    status="error",
                    error_type=exc_type.__name__,
                    error_message=str(exc_val),
                ),
                exc_info=(exc_type, exc_val, exc_tb),
            )
        return False
