"""
Core Infrastructure - Secure Configuration and Logging

This package provides centralized infrastructure utilities that should be used
throughout the application instead of direct library calls.

Usage:
    from dashquery.core import get_config, get_logger

    config = get_config()
    api_config = config.get_discover_config()

    logger = get_logger(__name__)
"""

from dashquery.core.logging_config import get_logger, log_with_context, setup_logging
from dashquery.secure_config import (
    ConfigurationError,
    DiscoverAPIConfig,
    OrchestratorConfig,
    SecureConfig,
    get_config,
)

__all__ = [
    # Configuration
    "get_config",
    "ConfigurationError",
    "SecureConfig",
    "DiscoverAPIConfig",
    "OrchestratorConfig",
    # Logging
    "get_logger",
    "log_with_context",
    "setup_logging",
]
