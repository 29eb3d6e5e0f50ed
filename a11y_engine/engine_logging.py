"""Logging for the accessibility engine.

All engine loggers live under ``a11y_engine``. Checkers, the revalidation
loop, the host document and the CLI each log through a category child so
a run can be filtered per component. Findings are logged as a titled group
(one record per line), the way a browser console groups them.
"""

import json
import logging
import logging.config
import logging.handlers
from collections.abc import Generator, Iterable
from contextlib import contextmanager
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

ROOT_LOGGER_NAME = "a11y_engine"

CONSOLE_FORMAT = "%(levelname)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s"


class LogCategory(Enum):
    """Components that log through their own child logger."""

    CHECKERS = "checkers"
    REVALIDATION = "revalidation"
    DOM = "dom"
    REGISTRY = "registry"
    CLI = "cli"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with checker context when present."""

    CONTEXT_FIELDS = ("checker_id", "issue_id", "severity", "element_count")

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "message": record.getMessage(),
        }
        entry.update(
            {name: getattr(record, name) for name in self.CONTEXT_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _console_level(level: str, quiet: bool, verbose: bool) -> str:
    if quiet:
        return "ERROR"
    return "DEBUG" if verbose else level


def _file_handler(
    log_file: Path, log_format: str, rotation_count: int, max_bytes: int
) -> dict[str, Any]:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json" if log_format == "json" else "detailed",
        "level": "DEBUG",
        "filename": str(log_file),
        "maxBytes": max_bytes,
        "backupCount": rotation_count,
        "encoding": "utf-8",
    }


def setup_logging(
    level: str = "INFO",
    quiet: bool = False,
    verbose: bool = False,
    log_file: Path | None = None,
    log_format: str = "text",
    rotation_count: int = 3,
    max_bytes: int = 10485760,
) -> logging.Logger:
    """Configure the engine logger.

    Console output goes to stderr so stdout stays free for reports. The
    optional file handler always records DEBUG.

    Args:
        level: Console level when neither quiet nor verbose is set.
        quiet: Only errors reach the console.
        verbose: Debug output on the console.
        log_file: Also log to this rotating file.
        log_format: File format, "text" or "json".
        rotation_count: Rotated files to keep.
        max_bytes: Size at which the file rotates.

    Returns:
        The ``a11y_engine`` logger.
    """
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
            "level": _console_level(level, quiet, verbose),
            "stream": "ext://sys.stderr",
        }
    }
    if log_file:
        handlers["file"] = _file_handler(log_file, log_format, rotation_count, max_bytes)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "simple": {"format": CONSOLE_FORMAT},
                "detailed": {"format": FILE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
                "json": {"()": JSONFormatter},
            },
            "handlers": handlers,
            "loggers": {
                ROOT_LOGGER_NAME: {
                    "handlers": list(handlers),
                    "level": "DEBUG",
                    "propagate": False,
                }
            },
        }
    )
    return logging.getLogger(ROOT_LOGGER_NAME)


def get_logger() -> logging.Logger:
    return logging.getLogger(ROOT_LOGGER_NAME)


def get_category_logger(category: LogCategory) -> logging.Logger:
    """Child logger for one component.

    Example:
        >>> logger = get_category_logger(LogCategory.CHECKERS)
        >>> logger.name
        'a11y_engine.checkers'
    """
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{category.value}")


def log_group(
    logger: logging.Logger,
    level: int,
    title: str,
    messages: Iterable[str],
    marker: str = "-",
    **extra: object,
) -> None:
    """Log a title followed by one indented, marked record per message."""
    if not logger.isEnabledFor(level):
        return
    logger.log(level, title, extra=extra or None)
    for message in messages:
        logger.log(level, "  %s %s", marker, message, extra=extra or None)


@contextmanager
def debug_context(
    logger: logging.Logger | None = None,
) -> Generator[logging.Logger, None, None]:
    """Drop a logger and its handlers to DEBUG for the duration of the block."""
    target = logger or get_logger()
    saved = [(target, target.level)] + [(h, h.level) for h in target.handlers]
    try:
        for obj, _ in saved:
            obj.setLevel(logging.DEBUG)
        yield target
    finally:
        for obj, previous in saved:
            obj.setLevel(previous)
