"""
Logging setup for dashquery.

Every module logs through ``get_logger(__name__)``. Structured fields (fetch
cycle number, query index, endpoint) travel on the record as ``extra_fields``:
JSON output merges them into the document, console output appends them as
``key=value`` pairs.

Usage:
    from dashquery.core.logging_config import get_logger, log_with_context

    logger = get_logger(__name__)
    log_with_context(logger, "info", "Fetch cycle settled", cycle=3, failed=0)
"""

import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "extra_fields", None) or {}


class JSONFormatter(logging.Formatter):
    """One JSON document per record, with the record's context fields merged in"""

    def format(self, record: logging.LogRecord) -> str:
        document = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
            **_extra_fields(record),
        }
        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)
        return json.dumps(document, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable line followed by the record's context fields"""

    def __init__(self):
        super().__init__(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _extra_fields(record)
        if not fields:
            return line
        return line + " | " + " ".join(f"{key}={value}" for key, value in fields.items())


def setup_logging(level: str = "INFO", log_file: Path | None = None, json_output: bool = False) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
        log_file: Also write JSON records to this file
        json_output: Use JSON on stdout instead of the console format

    Example:
        setup_logging(level="DEBUG")
        setup_logging(log_file=Path(".tmp/logs/dashquery.log"), json_output=True)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter() if json_output else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass ``__name__``)"""
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: str, message: str, **context: Any) -> None:
    """
    Log ``message`` with ``context`` attached as structured fields.

    Example:
        log_with_context(logger, "debug", "Created query builders", builders=2, deferred=1)
    """
    getattr(logger, level.lower())(message, extra={"extra_fields": context})
