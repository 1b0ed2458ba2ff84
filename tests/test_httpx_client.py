"""Tests for the httpx transport adapter."""

import httpx
import pytest

from verify_client.adapters.http.factory import create_http_client
from verify_client.adapters.http.httpx_client import HttpxClient
from verify_client.core.config import VerifySettings
from verify_client.core.errors import ErrorKind, TransportError


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpxClient:
    """Status handling and JSON decoding."""

    @pytest.mark.asyncio
    async def test_returns_status_and_json_body(self) -> None:
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["authorization"] = request.headers.get("Authorization", "")
            return httpx.Response(200, json={"robloxId": 5})

        client = HttpxClient(client=_mock_client(handler))
        response = await client.get("https://verify.test/api/roblox/1", {"Authorization": "tok"})

        assert response.status == 200
        assert response.ok is True
        assert response.body == {"robloxId": 5}
        assert seen == {"url": "https://verify.test/api/roblox/1", "authorization": "tok"}

    @pytest.mark.asyncio
    async def test_error_status_is_returned_not_raised(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, json={"error": {"retryAfter": 3}})

        client = HttpxClient(client=_mock_client(handler))
        response = await client.get("https://verify.test/api/roblox/1")

        assert response.status == 429
        assert response.ok is False
        assert response.body == {"error": {"retryAfter": 3}}

    @pytest.mark.asyncio
    async def test_non_json_body_decodes_to_none(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        client = HttpxClient(client=_mock_client(handler))
        response = await client.get("https://verify.test/api/roblox/1")

        assert response.status == 502
        assert response.body is None

    @pytest.mark.asyncio
    async def test_connection_failure_raises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = HttpxClient(client=_mock_client(handler))

        with pytest.raises(TransportError) as exc_info:
            await client.get("https://verify.test/api/roblox/1")

        assert exc_info.value.kind is ErrorKind.TRANSPORT
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_aclose_leaves_injected_client_open(self) -> None:
        injected = _mock_client(lambda request: httpx.Response(204))
        client = HttpxClient(client=injected)

        await client.aclose()

        assert injected.is_closed is False
        await injected.aclose()


@pytest.mark.asyncio
async def test_factory_applies_timeout_setting() -> None:
    client = create_http_client(VerifySettings(request_timeout_seconds=2.5))

    assert isinstance(client, HttpxClient)
    assert client.client.timeout.read == 2.5
    await client.aclose()
    assert client.client.is_closed is True
