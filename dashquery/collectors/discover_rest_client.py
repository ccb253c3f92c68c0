"""
Discover REST API Client

Network client used by query builders and team loaders.
Uses AsyncSecureHTTPClient for HTTP/2, connection pooling, and SSL enforcement.

Usage:
    from dashquery.collectors.discover_rest_client import get_discover_rest_client

    client = get_discover_rest_client()

    # Run a Discover query
    result = await client.request("/organizations/acme/discover/query/", {"fields": ["id"], "projects": [1]})

    # Load the user's teams
    teams = await client.request("/organizations/acme/user-teams/", method="GET")
"""

import asyncio
from typing import Any

import httpx

from dashquery.async_http_client import AsyncSecureHTTPClient
from dashquery.core import get_logger
from dashquery.secure_config import get_config
from dashquery.utils.error_handling import log_and_continue

logger = get_logger(__name__)


class DiscoverRESTClient:
    """
    Discover REST API client using direct HTTP calls.

    Features:
    - Async HTTP/2 requests with connection pooling
    - Bearer token authentication
    - Retry logic for rate limiting and server errors
    - Cancellable: cancelling the awaiting task aborts the request
    """

    API_PREFIX = "/api/0"

    def __init__(self, base_url: str, auth_token: str, timeout: float = 30.0, max_retries: int = 3):
        """
        Initialize Discover REST client.

        Args:
            base_url: Server URL (e.g., https://analytics.example.com)
            auth_token: API token for authentication
            timeout: Per-request timeout in seconds
            max_retries: Attempts for transient errors

        Raises:
            ValueError: If base_url or auth_token is empty
        """
        if not base_url or not auth_token:
            raise ValueError("base_url and auth_token are required")

        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self.max_retries = max_retries
        self.auth_header = self._build_auth_header(auth_token)

    def _build_auth_header(self, auth_token: str) -> dict[str, str]:
        """
        Build Bearer authentication header.

        Example:
            {"Authorization": "Bearer 0123abcd..."}
        """
        return {
            "Authorization": f"Bearer {auth_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _build_url(self, endpoint: str) -> str:
        """
        Build the full API URL for an endpoint.

        Example:
            _build_url("/organizations/acme/discover/query/")
            -> "https://analytics.example.com/api/0/organizations/acme/discover/query/"
        """
        return f"{self.base_url}{self.API_PREFIX}/{endpoint.lstrip('/')}"

    async def request(self, endpoint: str, payload: dict[str, Any] | None = None, method: str = "POST") -> Any:
        """
        Execute an API call with retry logic and error handling.

        Handles:
        - Rate limiting (429) with Retry-After backoff
        - Server errors (500, 502, 503) with exponential backoff
        - Network errors with retry
        - Authentication errors (401, 403) fail fast

        Args:
            endpoint: API path, e.g. "/organizations/acme/discover/query/"
            payload: JSON body for POST, query parameters for GET
            method: HTTP method (GET or POST)

        Returns:
            Parsed JSON response

        Raises:
            httpx.HTTPStatusError: For non-retryable HTTP errors
            httpx.RequestError: For network errors after retries exhausted
            ValueError: For unsupported methods
        """
        url = self._build_url(endpoint)
        verb = method.upper()
        if verb not in ("GET", "POST"):
            raise ValueError(f"Unsupported HTTP method: {method}")

        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                async with AsyncSecureHTTPClient(timeout=self.timeout) as client:
                    if verb == "GET":
                        response = await client.get(url, headers=self.auth_header, params=payload)
                    else:
                        response = await client.post(url, headers=self.auth_header, json=payload)

                    response.raise_for_status()
                    return response.json()

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code

                if status_code in [401, 403]:
                    logger.error(f"Authentication failed (HTTP {status_code}): {e.response.text}")
                    raise

                if status_code == 429:
                    retry_after = int(e.response.headers.get("Retry-After", 60))
                    logger.warning(
                        f"Rate limited, retrying after {retry_after}s (attempt {attempt + 1}/{self.max_retries})"
                    )
                    await asyncio.sleep(retry_after)
                    last_error = e
                    continue

                if status_code in [500, 502, 503]:
                    backoff = 2**attempt  # 1s, 2s, 4s
                    logger.warning(
                        f"Server error (HTTP {status_code}), retrying in {backoff}s "
                        f"(attempt {attempt + 1}/{self.max_retries})"
                    )
                    await asyncio.sleep(backoff)
                    last_error = e
                    continue

                logger.error(f"HTTP error {status_code}: {e.response.text}")
                raise

            except httpx.RequestError as e:
                backoff = 2**attempt
                logger.warning(
                    f"Network error, retrying in {backoff}s (attempt {attempt + 1}/{self.max_retries}): {e}"
                )
                await asyncio.sleep(backoff)
                last_error = e
                continue

        if last_error:
            log_and_continue(logger, last_error, {"url": url, "max_retries": self.max_retries}, "Discover API call")
            raise last_error

        raise RuntimeError("Unexpected: No error but retries exhausted")


def get_discover_rest_client() -> DiscoverRESTClient:
    """
    Build a client from the validated configuration.

    Raises:
        ConfigurationError: If DISCOVER_API_URL / DISCOVER_AUTH_TOKEN are missing or invalid
    """
    config = get_config()
    api_config = config.get_discover_config()
    orchestrator_config = config.get_orchestrator_config()

    return DiscoverRESTClient(
        base_url=api_config.base_url,
        auth_token=api_config.auth_token,
        timeout=orchestrator_config.request_timeout_seconds,
        max_retries=orchestrator_config.max_retries,
    )
