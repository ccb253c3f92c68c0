"""
Async HTTP transport for Discover requests.

Every widget query of a dashboard goes through one pooled httpx client per
request attempt. SSL verification is always on and every call carries a
timeout.

Usage:
    async with AsyncSecureHTTPClient(timeout=10) as client:
        response = await client.post(url, headers=headers, json=payload)
"""

from typing import Any

import httpx

# A dashboard rarely shows more than a few dozen widget queries at once
MAX_CONNECTIONS = 50
MAX_KEEPALIVE_CONNECTIONS = 10


class AsyncSecureHTTPClient:
    """
    Async context manager wrapping ``httpx.AsyncClient``.

    Args:
        timeout: Per-request timeout in seconds
        http2: Negotiate HTTP/2 so concurrent queries share a connection
    """

    def __init__(self, timeout: float = 30.0, http2: bool = True):
        self.timeout = httpx.Timeout(timeout)
        self.http2 = http2
        self.client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "AsyncSecureHTTPClient":
        self.client = httpx.AsyncClient(
            limits=httpx.Limits(max_connections=MAX_CONNECTIONS, max_keepalive_connections=MAX_KEEPALIVE_CONNECTIONS),
            timeout=self.timeout,
            verify=True,
            http2=self.http2,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if not self.client:
            raise RuntimeError("Client not initialized. Use 'async with AsyncSecureHTTPClient()'")
        kwargs.setdefault("timeout", self.timeout)
        return await getattr(self.client, method)(url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """GET ``url``; ``params`` carries the query string"""
        return await self._send("get", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """POST ``url``; ``json`` carries the body"""
        return await self._send("post", url, **kwargs)
