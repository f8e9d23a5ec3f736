"""Tests for logging setup."""

import json
import logging
from pathlib import Path

from rich.logging import RichHandler

from nda_search.utils.logging import (
    ContextFormatter,
    JSONLogFormatter,
    get_logger,
    log_with_context,
    setup_logging,
    timed,
)


def _record(message: str, **context: object) -> logging.LogRecord:
    record = logging.LogRecord("nda_search.test", logging.INFO, __file__, 1, message, (), None)
    record.context = context
    return record


class TestFormatters:
    def test_json_merges_context(self) -> None:
        entry = json.loads(JSONLogFormatter().format(_record("batch done", batch=2)))

        assert entry["message"] == "batch done"
        assert entry["level"] == "INFO"
        assert entry["batch"] == 2

    def test_context_pairs_appended(self) -> None:
        text = ContextFormatter().format(_record("batch done", batch=2, total=3))
        assert text == "nda_search.test: batch done [batch=2 total=3]"

    def test_no_context(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "plain", (), None)
        assert ContextFormatter().format(record) == "x: plain"


class TestSetupLogging:
    def test_console_handler(self) -> None:
        logger = setup_logging(level="info")

        assert logger.level == logging.INFO
        assert isinstance(logger.handlers[0], RichHandler)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_debug_enables_library_logs(self) -> None:
        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_repeated_setup_replaces_handlers(self) -> None:
        setup_logging()
        logger = setup_logging(json_format=True)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONLogFormatter)

    def test_file_logs_are_json(self, temp_dir: Path) -> None:
        log_file = temp_dir / "logs" / "nda-search.log"
        setup_logging(level="DEBUG", log_file=log_file)

        log_with_context(get_logger("nda_search.test"), logging.INFO, "hello", query="age")
        for handler in logging.getLogger("nda_search").handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "hello"
        assert entry["query"] == "age"
        setup_logging()


class TestTimed:
    def test_logs_elapsed(self, temp_dir: Path) -> None:
        log_file = temp_dir / "timed.log"
        setup_logging(level="DEBUG", log_file=log_file)

        with timed(get_logger("nda_search.test"), "Service request", method="GET"):
            pass
        for handler in logging.getLogger("nda_search").handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "Service request"
        assert entry["method"] == "GET"
        assert entry["elapsed_ms"] >= 0
        setup_logging()
