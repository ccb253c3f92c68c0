"""
Tests for logging configuration
"""

import json
import logging
from unittest.mock import MagicMock

import pytest

from dashquery.core.logging_config import (
    ConsoleFormatter,
    JSONFormatter,
    get_logger,
    log_with_context,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after the test"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(**extra):
    record = logging.LogRecord("dashquery.test", logging.INFO, __file__, 10, "Fetch cycle settled", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test structured JSON output"""

    def test_basic_fields(self):
        payload = json.loads(JSONFormatter().format(make_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "dashquery.test"
        assert payload["message"] == "Fetch cycle settled"
        assert payload["timestamp"].endswith("Z")

    def test_extra_fields_merged(self):
        payload = json.loads(JSONFormatter().format(make_record(extra_fields={"cycle": 3, "failed": 0})))

        assert payload["cycle"] == 3
        assert payload["failed"] == 0


class TestConsoleFormatter:
    """Test human-readable output"""

    def test_plain_line(self):
        line = ConsoleFormatter().format(make_record())

        assert line.endswith("| INFO     | dashquery.test | Fetch cycle settled")

    def test_context_fields_appended(self):
        line = ConsoleFormatter().format(make_record(extra_fields={"cycle": 3, "failed": 0}))

        assert line.endswith("Fetch cycle settled | cycle=3 failed=0")


class TestSetupLogging:
    """Test application-wide logging setup"""

    def test_sets_level_and_handler(self, restore_root_logger):
        setup_logging(level="DEBUG")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, ConsoleFormatter)

    def test_json_output(self, restore_root_logger):
        setup_logging(json_output=True)

        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_log_file_uses_json(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "dashquery.log"

        setup_logging(log_file=log_file)

        file_handler = restore_root_logger.handlers[1]
        assert isinstance(file_handler.formatter, JSONFormatter)
        assert log_file.parent.exists()
        file_handler.close()

    def test_quiets_httpx(self, restore_root_logger):
        setup_logging(level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING


class TestHelpers:
    """Test logger helpers"""

    def test_get_logger(self):
        assert get_logger("dashquery.orchestrator").name == "dashquery.orchestrator"

    def test_log_with_context(self):
        logger = MagicMock(spec=logging.Logger)

        log_with_context(logger, "info", "Created query builders", builders=2, deferred=1)

        logger.info.assert_called_once_with(
            "Created query builders", extra={"extra_fields": {"builders": 2, "deferred": 1}}
        )
