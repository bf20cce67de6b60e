"""
Shared async HTTP client for outbound calls.

This module provides a pooled HTTP client that injects correlation headers
and converts transport failures into ServiceErrors. Status codes are left
to the caller, which owns the retry decision.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from .context import RunContext
from .errors import ErrorCode, RetryableError, ServiceError


class ServiceHttpClient:
    """Shared HTTP client for calls to external services.

    Features:
    - Connection pooling via httpx.AsyncClient
    - Automatic header injection (X-Request-Id, X-App-Id)
    - Timeout handling
    - Structured error conversion for transport failures

    Example:
        client = ServiceHttpClient("https://generativelanguage.googleapis.com/v1beta")
        async with client:
            response = await client.post("/models/m:generateContent", context, json=body)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_connections: int = 20,
        max_keepalive: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the HTTP client.

        Args:
            base_url: Base URL for all requests.
            timeout: Default timeout in seconds.
            max_connections: Maximum total connections in pool.
            max_keepalive: Maximum keepalive connections.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self._limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
            keepalive_expiry=30.0,
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=self._limits,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ServiceHttpClient":
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _build_url(self, path: str) -> str:
        path = path.lstrip("/")
        return f"{self.base_url}/{path}"

    async def request(
        self,
        method: str,
        path: str,
        context: RunContext,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make one HTTP request with correlation headers.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: Request path.
            context: RunContext for header injection and correlation.
            **kwargs: Additional arguments passed to httpx.

        Returns:
            The HTTP response, whatever its status code.

        Raises:
            RetryableError: On timeout or connection failure.
            ServiceError: On any other transport failure.
        """
        client = await self._get_client()
        url = self._build_url(path)

        headers = kwargs.pop("headers", {})
        headers.update(context.get_headers())

        try:
            return await client.request(method=method, url=url, headers=headers, **kwargs)

        except httpx.TimeoutException as e:
            raise RetryableError(
                code=ErrorCode.TIMEOUT,
                message_safe=f"Request timed out after {self.timeout}s",
                cause=e,
            ) from e

        except httpx.ConnectError as e:
            raise RetryableError(
                code=ErrorCode.CONNECTION_ERROR,
                message_safe="Failed to connect to service",
                message_debug=str(e),
                cause=e,
            ) from e

        except httpx.HTTPError as e:
            logger.error(f"[{context.request_id}] Transport error on {method} {path}: {e}")
            raise ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message_safe="Unexpected error during request",
                message_debug=str(e),
                cause=e,
            ) from e

    async def get(self, path: str, context: RunContext, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self.request("GET", path, context, **kwargs)

    async def post(self, path: str, context: RunContext, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return await self.request("POST", path, context, **kwargs)
