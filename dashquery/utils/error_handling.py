#!/usr/bin/env python3
"""
Error Handling Utility Module

Reusable error handling patterns that keep failures structured in the logs
instead of bare `except Exception:` blocks.

This module provides two core utilities:
1. log_and_continue() - Log error and continue execution (for expected failures)
2. log_and_return_default() - Log error and return a default value
"""

import logging
from typing import Any


def log_and_continue(
    logger: logging.Logger,
    error: BaseException,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Log an error with structured context and continue execution gracefully.

    Use this when encountering expected errors that should not halt execution
    (e.g., one failed query in a fetch cycle).

    Args:
        logger: Logger instance from logging.getLogger(__name__)
        error: The caught exception
        context: Structured data about what failed (query index, endpoint, etc.)
        error_type: Human-readable description of the operation

    Example:
        for index, outcome in enumerate(outcomes):
            if isinstance(outcome, Exception):
                log_and_continue(logger, outcome, context={"query_index": index}, error_type="Discover query")
    """
    logger.warning(
        f"{error_type} failed: {error}",
        extra={
            "extra_fields": {
                "error_type": error_type,
                "exception_class": error.__class__.__name__,
                "context": context,
            }
        },
    )


def log_and_return_default(
    logger: logging.Logger,
    error: BaseException,
    context: dict[str, Any],
    default_value: Any = None,
    error_type: str = "Operation",
) -> Any:
    """
    Log an error and return a default value (for functions that need to return something).

    Args:
        logger: Logger instance
        error: The caught exception
        context: Structured data about what failed
        default_value: Value to return on error (None, [], {}, etc.)
        error_type: Human-readable description

    Returns:
        default_value

    Example:
        try:
            teams = await client.request(endpoint, method="GET")
        except httpx.HTTPError as e:
            return log_and_return_default(logger, e, context={"endpoint": endpoint}, default_value=[])
    """
    logger.warning(
        f"{error_type} failed, returning default value: {error}",
        extra={
            "extra_fields": {
                "error_type": error_type,
                "exception_class": error.__class__.__name__,
                "context": context,
                "default_value": str(default_value),
            }
        },
    )
    return default_value
