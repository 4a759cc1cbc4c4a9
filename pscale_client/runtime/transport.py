"""
HTTP transport for the operation dispatcher.

The dispatcher only needs ``execute(method, url, headers, body)``; this module
defines that contract and a pooled httpx implementation of it. Transport
failures (connection errors, timeouts, protocol errors) surface as
``NetworkError`` and nothing else is interpreted here: status codes and bodies
are handed back untouched.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, NamedTuple, Protocol

import httpx
from loguru import logger

from .errors import NetworkError


class TransportResponse(NamedTuple):
    """Raw HTTP response: status, body bytes, lower-cased headers."""

    status_code: int
    content: bytes
    headers: Mapping[str, str] = MappingProxyType({})


class Transport(Protocol):
    """Anything able to perform one HTTP request."""

    async def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> TransportResponse: ...


class HttpxTransport:
    """Pooled transport backed by ``httpx.AsyncClient``.

    Example:
        async with HttpxTransport(timeout=10.0) as transport:
            response = await transport.execute("GET", url, headers)
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_connections: int = 100,
        max_keepalive: int = 20,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the transport.

        Args:
            timeout: Default timeout in seconds.
            max_connections: Maximum total connections in pool.
            max_keepalive: Maximum keepalive connections.
            client: Optional pre-built client; the transport then does not own it.
        """
        self.timeout = timeout
        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
            keepalive_expiry=30.0,
        )
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=self._limits,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def execute(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> TransportResponse:
        """Send one request and return the raw response.

        Raises:
            NetworkError: If no HTTP response was received.
        """
        client = await self._get_client()
        try:
            response = await client.request(
                method=method,
                url=url,
                headers=dict(headers),
                content=body,
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout for {method} {url} after {self.timeout}s")
            raise NetworkError(f"Request timed out after {self.timeout}s", cause=e) from e
        except httpx.RequestError as e:
            logger.warning(f"Transport error for {method} {url}: {type(e).__name__}: {e}")
            raise NetworkError(f"Failed to reach API: {type(e).__name__}", cause=e) from e

        return TransportResponse(
            status_code=response.status_code,
            content=response.content,
            headers={key.lower(): value for key, value in response.headers.items()},
        )
