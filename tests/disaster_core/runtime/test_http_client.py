"""Unit tests for ServiceHttpClient."""

import httpx
import pytest

from disaster_core.runtime.context import RunContext
from disaster_core.runtime.errors import ErrorCode, RetryableError, ServiceError
from disaster_core.runtime.http_client import ServiceHttpClient


@pytest.fixture
def context():
    return RunContext(request_id="req-42", app_id="test-app")


class TestServiceHttpClient:
    """Tests for request building and error conversion."""

    def test_build_url(self):
        """Slashes are normalized between base and path."""
        client = ServiceHttpClient("https://api.example.com/v1/")

        assert client._build_url("/models/m:generateContent") == (
            "https://api.example.com/v1/models/m:generateContent"
        )

    @pytest.mark.asyncio
    async def test_injects_context_headers(self, context):
        """Correlation headers are added to every request."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"ok": True})

        async with ServiceHttpClient("https://api.example.com", transport=httpx.MockTransport(handler)) as client:
            response = await client.post("items", context, params={"key": "k"}, json={"a": 1})

        assert response.status_code == 200
        assert seen["headers"]["X-Request-Id"] == "req-42"
        assert seen["headers"]["X-App-Id"] == "test-app"
        assert seen["url"] == "https://api.example.com/items?key=k"

    @pytest.mark.asyncio
    async def test_returns_error_statuses(self, context):
        """Status codes are left to the caller."""
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="oops"))

        async with ServiceHttpClient("https://api.example.com", transport=transport) as client:
            response = await client.get("items", context)

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_timeout_becomes_retryable(self, context):
        """Timeouts surface as RetryableError(TIMEOUT)."""

        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with ServiceHttpClient("https://api.example.com", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(RetryableError) as exc_info:
                await client.get("items", context)

        assert exc_info.value.code == ErrorCode.TIMEOUT

    @pytest.mark.asyncio
    async def test_connect_error_becomes_retryable(self, context):
        """Connection failures surface as RetryableError(CONNECTION_ERROR)."""

        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with ServiceHttpClient("https://api.example.com", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(RetryableError) as exc_info:
                await client.get("items", context)

        assert exc_info.value.code == ErrorCode.CONNECTION_ERROR

    @pytest.mark.asyncio
    async def test_other_transport_error(self, context):
        """Other transport failures surface as ServiceError(INTERNAL_ERROR)."""

        def handler(request):
            raise httpx.RemoteProtocolError("garbled", request=request)

        async with ServiceHttpClient("https://api.example.com", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ServiceError) as exc_info:
                await client.get("items", context)

        assert exc_info.value.code == ErrorCode.INTERNAL_ERROR
        assert not exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        """Closing twice is harmless."""
        client = ServiceHttpClient("https://api.example.com")
        await client._get_client()

        await client.close()
        await client.close()

        assert client._client is None
