"""HTTP transport for webhook deliveries.

The dispatcher only needs one capability from the network: POST a JSON
body and get back a status code and body, or an error. Transport is that
seam; HttpxTransport is the production implementation.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from hookline.exceptions import DeliveryTimeoutError, TransportError
from hookline.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Response received from a webhook endpoint.

    Attributes:
        status_code: HTTP status code.
        body: Parsed JSON body, raw text, or None when empty.
    """

    status_code: int
    body: Any = None

    @property
    def is_success(self) -> bool:
        """True for 2xx status codes."""
        return 200 <= self.status_code < 300


class Transport(ABC):
    """Capability to POST a JSON body to a URL."""

    @abstractmethod
    async def post(
        self,
        url: str,
        json_body: Mapping[str, Any],
        timeout: float,
        headers: Mapping[str, str],
    ) -> TransportResponse:
        """Send an HTTP POST.

        Any HTTP response, including non-2xx, is returned rather than raised.

        Args:
            url: Target URL.
            json_body: JSON-serializable body.
            timeout: Hard deadline for the whole request, in seconds.
            headers: Request headers.

        Returns:
            TransportResponse with status code and body.

        Raises:
            DeliveryTimeoutError: If the deadline passed before a response arrived.
            TransportError: If no response could be obtained.
        """
        ...

    async def close(self) -> None:  # noqa: B027
        """Release network resources. No-op by default."""


def _parse_body(response: httpx.Response) -> Any:
    """Decode a response body: JSON when declared, text otherwise."""
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            logger.debug("Response declared JSON but did not parse", content_type=content_type)
    return response.text


class HttpxTransport(Transport):
    """Transport backed by httpx.AsyncClient.

    Without an injected client, a short-lived client is opened per request.
    Pass a shared client to reuse connections across deliveries.

    Example:
        ```python
        async with httpx.AsyncClient() as client:
            transport = HttpxTransport(client)
            response = await transport.post(url, {"content": "hi"}, 10.0, headers)
        ```
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client

    async def _send(
        self,
        client: httpx.AsyncClient,
        url: str,
        json_body: Mapping[str, Any],
        timeout: float,
        headers: Mapping[str, str],
    ) -> httpx.Response:
        # httpx timeouts are per phase; wait_for bounds the request as a whole
        return await asyncio.wait_for(
            client.post(url, json=dict(json_body), headers=dict(headers), timeout=timeout),
            timeout=timeout,
        )

    async def post(
        self,
        url: str,
        json_body: Mapping[str, Any],
        timeout: float,
        headers: Mapping[str, str],
    ) -> TransportResponse:
        try:
            if self._client is not None:
                response = await self._send(self._client, url, json_body, timeout, headers)
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await self._send(client, url, json_body, timeout, headers)
        except (httpx.TimeoutException, TimeoutError) as e:
            raise DeliveryTimeoutError(f"timeout of {int(timeout * 1000)}ms exceeded") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or e.__class__.__name__) from e

        return TransportResponse(status_code=response.status_code, body=_parse_body(response))

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = [
    "HttpxTransport",
    "Transport",
    "TransportResponse",
]
