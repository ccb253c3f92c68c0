#!/usr/bin/env python3
"""
Tests for Error Handling Utility Module

Tests both core utilities:
1. log_and_continue() - Continue execution after logging
2. log_and_return_default() - Return default value after logging
"""

import logging
from unittest.mock import MagicMock

import pytest

from dashquery.utils.error_handling import log_and_continue, log_and_return_default


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing log calls."""
    return MagicMock(spec=logging.Logger)


class TestLogAndContinue:
    """Test suite for log_and_continue() function."""

    def test_logs_at_warning_level(self, mock_logger):
        """Test that log_and_continue logs at WARNING level."""
        error = ValueError("test error")

        log_and_continue(mock_logger, error, {"query_index": 1}, "Discover query")

        mock_logger.warning.assert_called_once()
        message = mock_logger.warning.call_args[0][0]
        assert "Discover query failed" in message
        assert "test error" in message

    def test_includes_structured_context(self, mock_logger):
        """Test that structured context is included in log extra."""
        error = RuntimeError("boom")
        context = {"query_index": 2, "cycle": 5}

        log_and_continue(mock_logger, error, context, "Discover query")

        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["extra_fields"]["context"] == context
        assert extra["extra_fields"]["error_type"] == "Discover query"
        assert extra["extra_fields"]["exception_class"] == "RuntimeError"

    def test_returns_none(self, mock_logger):
        """Test that log_and_continue does not raise."""
        assert log_and_continue(mock_logger, ValueError("x"), {}) is None

    def test_default_error_type(self, mock_logger):
        log_and_continue(mock_logger, ValueError("x"), {})

        assert "Operation failed" in mock_logger.warning.call_args[0][0]


class TestLogAndReturnDefault:
    """Test suite for log_and_return_default() function."""

    def test_returns_default_value(self, mock_logger):
        """Test that the given default is returned."""
        result = log_and_return_default(mock_logger, ValueError("x"), {}, default_value=[])

        assert result == []

    def test_returns_none_by_default(self, mock_logger):
        assert log_and_return_default(mock_logger, ValueError("x"), {}) is None

    def test_logs_default_value(self, mock_logger):
        """Test that the default is recorded in the log context."""
        log_and_return_default(
            mock_logger, KeyError("teams"), {"endpoint": "/x"}, default_value=[], error_type="User teams request"
        )

        mock_logger.warning.assert_called_once()
        message = mock_logger.warning.call_args[0][0]
        extra = mock_logger.warning.call_args[1]["extra"]["extra_fields"]
        assert "User teams request failed, returning default value" in message
        assert extra["default_value"] == "[]"
        assert extra["context"] == {"endpoint": "/x"}
