"""Tests for the httpx-backed transport."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from hookline.exceptions import DeliveryTimeoutError, TransportError
from hookline.transport import HttpxTransport, TransportResponse

URL = "https://example.com/hooks/deploys"
HEADERS = {"Content-Type": "application/json", "User-Agent": "Hookline-Webhook-Manager/1.0"}


def make_transport(handler) -> tuple[HttpxTransport, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxTransport(client), client


class TestTransportResponse:
    """Tests for TransportResponse."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [(199, False), (200, True), (204, True), (299, True), (300, False), (500, False)],
    )
    def test_is_success(self, status: int, expected: bool):
        """Only 2xx codes are successes."""
        assert TransportResponse(status).is_success is expected


class TestHttpxTransport:
    """Tests for HttpxTransport.post."""

    async def test_posts_json_with_headers(self):
        """The body is sent as JSON with the given headers."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            seen["headers"] = request.headers
            return httpx.Response(204)

        transport, _ = make_transport(handler)
        response = await transport.post(URL, {"content": "hi", "tts": False}, 10.0, HEADERS)
        await transport.close()

        assert response == TransportResponse(status_code=204, body=None)
        assert seen["method"] == "POST"
        assert seen["url"] == URL
        assert seen["body"] == {"content": "hi", "tts": False}
        assert seen["headers"]["content-type"] == "application/json"
        assert seen["headers"]["user-agent"] == "Hookline-Webhook-Manager/1.0"

    async def test_parses_json_body(self):
        """JSON responses are decoded."""
        transport, _ = make_transport(lambda request: httpx.Response(200, json={"id": "msg_1"}))
        response = await transport.post(URL, {"content": "hi"}, 10.0, HEADERS)
        assert response.body == {"id": "msg_1"}

    async def test_text_body(self):
        """Non-JSON responses are returned as text."""
        transport, _ = make_transport(lambda request: httpx.Response(200, text="ok"))
        response = await transport.post(URL, {"content": "hi"}, 10.0, HEADERS)
        assert response.body == "ok"

    async def test_non_2xx_is_returned_not_raised(self):
        """HTTP error statuses are returned for the caller to classify."""
        transport, _ = make_transport(lambda request: httpx.Response(404, text="Unknown Webhook"))
        response = await transport.post(URL, {"content": "hi"}, 10.0, HEADERS)
        assert response.status_code == 404
        assert response.is_success is False

    async def test_connection_error(self):
        """Connection failures become TransportError without a status code."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        transport, _ = make_transport(handler)
        with pytest.raises(TransportError) as exc_info:
            await transport.post(URL, {"content": "hi"}, 10.0, HEADERS)

        assert exc_info.value.status_code is None
        assert "Connection refused" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    async def test_invalid_url(self):
        """URLs httpx cannot use become TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.InvalidURL("Invalid port: 'http'")

        transport, _ = make_transport(handler)
        with pytest.raises(TransportError, match="Invalid port") as exc_info:
            await transport.post(URL, {"content": "hi"}, 10.0, HEADERS)

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)

    async def test_httpx_timeout(self):
        """httpx timeouts become DeliveryTimeoutError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        transport, _ = make_transport(handler)
        with pytest.raises(DeliveryTimeoutError, match="timeout of 10000ms exceeded"):
            await transport.post(URL, {"content": "hi"}, 10.0, HEADERS)

    async def test_total_deadline(self):
        """A response slower than the deadline is a timeout."""

        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1.0)
            return httpx.Response(204)

        transport, _ = make_transport(handler)
        with pytest.raises(DeliveryTimeoutError):
            await transport.post(URL, {"content": "hi"}, 0.05, HEADERS)

    async def test_close_closes_client(self):
        """close() releases the client."""
        transport, client = make_transport(lambda request: httpx.Response(204))
        await transport.close()
        assert client.is_closed
