"""
Secure Configuration Management

Provides centralized, validated configuration for the Discover query layer.
Replaces loose os.getenv() calls with strict validation and fail-fast behavior.

Usage:
    from dashquery.secure_config import get_config

    config = get_config()
    api_config = config.get_discover_config()
    print(api_config.base_url)

Security Features:
    - Strict validation of all configuration values
    - Fail-fast on missing/invalid configuration
    - Placeholder detection (e.g., "your_token_here")
    - HTTPS enforcement for URLs

Raises:
    ConfigurationError: If configuration is missing or invalid
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class DiscoverAPIConfig:
    """
    Validated Discover API configuration.
    """

    base_url: str
    auth_token: str

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self):
        """
        Validate Discover API configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.base_url:
            raise ConfigurationError("DISCOVER_API_URL is required")

        if not self.base_url.startswith("https://"):
            raise ConfigurationError(f"DISCOVER_API_URL must use HTTPS: {self.base_url}")

        if not self.auth_token:
            raise ConfigurationError("DISCOVER_AUTH_TOKEN is required")

        if len(self.auth_token) < 20:
            raise ConfigurationError(
                f"DISCOVER_AUTH_TOKEN appears invalid (too short: {len(self.auth_token)} chars, expected >=20)"
            )

        placeholders = ["your_token", "example", "placeholder", "xxx", "replace_me"]
        if any(placeholder in self.auth_token.lower() for placeholder in placeholders):
            raise ConfigurationError("DISCOVER_AUTH_TOKEN contains a placeholder value - please set a real token")


@dataclass
class OrchestratorConfig:
    """
    Validated query orchestration settings.

    Attributes:
        request_timeout_seconds: Timeout for each Discover request
        max_retries: Attempts for transient (429/5xx/network) failures
    """

    request_timeout_seconds: float = 30.0
    max_retries: int = 3

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.request_timeout_seconds <= 0:
            raise ConfigurationError(
                f"DISCOVER_TIMEOUT_SECONDS must be positive, got {self.request_timeout_seconds}"
            )
        if self.max_retries < 1:
            raise ConfigurationError(f"DISCOVER_MAX_RETRIES must be at least 1, got {self.max_retries}")


def _parse_number(name: str, raw: str | None, default, cast):
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


class SecureConfig:
    """
    Centralized secure configuration manager.

    Loads and validates all application configuration from environment variables.
    Provides fail-fast behavior to catch configuration issues early.
    """

    def __init__(self):
        """Initialize configuration (loads .env file)."""
        load_dotenv()

    def get_discover_config(self) -> DiscoverAPIConfig:
        """
        Get validated Discover API configuration.

        Returns:
            DiscoverAPIConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        base_url = os.getenv("DISCOVER_API_URL")
        auth_token = os.getenv("DISCOVER_AUTH_TOKEN")

        return DiscoverAPIConfig(base_url=base_url or "", auth_token=auth_token or "")

    def get_orchestrator_config(self) -> OrchestratorConfig:
        """
        Get validated orchestration settings (all optional, with defaults).

        Raises:
            ConfigurationError: If a value is present but malformed
        """
        return OrchestratorConfig(
            request_timeout_seconds=_parse_number(
                "DISCOVER_TIMEOUT_SECONDS", os.getenv("DISCOVER_TIMEOUT_SECONDS"), 30.0, float
            ),
            max_retries=_parse_number("DISCOVER_MAX_RETRIES", os.getenv("DISCOVER_MAX_RETRIES"), 3, int),
        )


# Convenience function for getting configuration
_config_instance = None


def get_config() -> SecureConfig:
    """
    Get the global configuration instance (singleton pattern).

    Returns:
        SecureConfig: The configuration manager
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = SecureConfig()
    return _config_instance
