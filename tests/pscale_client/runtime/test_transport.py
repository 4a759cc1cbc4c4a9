"""Unit tests for HttpxTransport."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from pscale_client.runtime.errors import NetworkError
from pscale_client.runtime.transport import HttpxTransport, TransportResponse


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestTransportResponse:
    """Tests for the raw response tuple."""

    def test_default_headers_are_read_only(self):
        """Responses built without headers cannot leak writes into each other."""
        first = TransportResponse(204, b"")
        second = TransportResponse(204, b"")

        with pytest.raises(TypeError):
            first.headers["x-leak"] = "1"

        assert dict(first.headers) == {}
        assert "x-leak" not in second.headers


class TestHttpxTransportInit:
    """Tests for transport initialization."""

    def test_stores_configuration(self):
        transport = HttpxTransport(timeout=10.0, max_connections=5, max_keepalive=2)

        assert transport.timeout == 10.0
        assert transport._limits.max_connections == 5
        assert transport._limits.max_keepalive_connections == 2

    @pytest.mark.asyncio
    async def test_creates_client_lazily(self):
        transport = HttpxTransport()
        assert transport._client is None

        async with transport:
            assert isinstance(transport._client, httpx.AsyncClient)

        assert transport._client is None


class TestExecute:
    """Tests for sending requests."""

    @pytest.mark.asyncio
    async def test_sends_request(self):
        """Should forward method, URL, headers and body untouched."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["authorization"] = request.headers["Authorization"]
            seen["body"] = request.content
            return httpx.Response(201, content=b'{"id": "db1"}', headers={"X-Request-Id": "r1"})

        transport = HttpxTransport(client=mock_client(handler))

        response = await transport.execute(
            "POST",
            "https://api.test/v1/organizations/acme/databases",
            {"Authorization": "id:secret"},
            b'{"name": "main"}',
        )

        assert seen == {
            "method": "POST",
            "url": "https://api.test/v1/organizations/acme/databases",
            "authorization": "id:secret",
            "body": b'{"name": "main"}',
        }
        assert isinstance(response, TransportResponse)
        assert response.status_code == 201
        assert response.content == b'{"id": "db1"}'
        assert response.headers["x-request-id"] == "r1"

    @pytest.mark.asyncio
    async def test_error_statuses_are_returned(self):
        """Status codes are not interpreted by the transport."""
        transport = HttpxTransport(
            client=mock_client(lambda request: httpx.Response(503, text="unavailable"))
        )

        response = await transport.execute("GET", "https://api.test/v1/organizations", {})

        assert response.status_code == 503
        assert response.content == b"unavailable"

    @pytest.mark.asyncio
    async def test_connect_error_becomes_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        transport = HttpxTransport(client=mock_client(handler))

        with pytest.raises(NetworkError) as exc_info:
            await transport.execute("GET", "https://api.test/v1/organizations", {})

        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert "ConnectError" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_becomes_network_error(self):
        transport = HttpxTransport(timeout=5.0)

        with patch.object(transport, "_get_client") as mock_get_client:
            mock_http_client = AsyncMock()
            mock_http_client.request = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
            mock_get_client.return_value = mock_http_client

            with pytest.raises(NetworkError) as exc_info:
                await transport.execute("GET", "https://api.test/v1/organizations", {})

        assert "timed out after 5.0s" in exc_info.value.message


class TestClose:
    """Tests for releasing connections."""

    @pytest.mark.asyncio
    async def test_does_not_close_borrowed_client(self):
        client = mock_client(lambda request: httpx.Response(200))
        transport = HttpxTransport(client=client)

        await transport.close()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_closes_owned_client(self):
        transport = HttpxTransport()
        client = await transport._get_client()

        await transport.close()

        assert client.is_closed
