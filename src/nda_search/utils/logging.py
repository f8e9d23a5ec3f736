"""Logging setup for nda-search.

Console logs go to stderr through rich so they never mix with search
results on stdout. Log files are always JSON lines.
"""

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "nda_search"

# Libraries that log every request at INFO
NOISY_LIBRARIES = ("httpx", "httpcore")

logger = logging.getLogger(LOGGER_NAME)


def _context(record: logging.LogRecord) -> dict[str, Any]:
    extra = getattr(record, "context", None)
    return extra if isinstance(extra, dict) else {}


class JSONLogFormatter(logging.Formatter):
    """One JSON object per record, with any attached context merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ContextFormatter(logging.Formatter):
    """Console formatter that appends context as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__("%(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = _context(record)
        if context:
            pairs = " ".join(f"{key}={value}" for key, value in context.items())
            message = f"{message} [{pairs}]"
        return message


def setup_logging(
    level: str = "WARNING",
    log_file: Path | None = None,
    json_format: bool = False,
    use_color: bool = True,
) -> logging.Logger:
    """Configure the ``nda_search`` logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file to append JSON logs to.
        json_format: Write JSON to the console instead of rich text.
        use_color: Use colors in console output.

    Returns:
        The configured package logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    logger.setLevel(numeric_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler: logging.Handler
    if json_format:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(JSONLogFormatter())
    else:
        console_handler = RichHandler(
            console=Console(stderr=True, no_color=not use_color),
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        )
        console_handler.setFormatter(ContextFormatter())
    console_handler.setLevel(numeric_level)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(JSONLogFormatter())
        logger.addHandler(file_handler)

    logger.propagate = False

    # Request lines from httpx only show up in debug sessions
    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger for a module, e.g. ``nda_search.service.http``."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """Log a message with key-value context attached to the record."""
    if logger.isEnabledFor(level):
        logger.log(level, message, extra={"context": context}, stacklevel=2)


@contextmanager
def timed(logger: logging.Logger, message: str, **context: Any) -> Iterator[None]:
    """Log ``message`` at DEBUG with the elapsed time once the block exits."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = round((time.perf_counter() - start) * 1000, 1)
        log_with_context(logger, logging.DEBUG, message, elapsed_ms=elapsed_ms, **context)
