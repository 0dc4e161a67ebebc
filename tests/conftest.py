"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

# Add tests directory to path so test modules can import FakeTransport
tests_dir = Path(__file__).parent
if str(tests_dir) not in sys.path:
    sys.path.insert(0, str(tests_dir))

from hookline.config import Settings
from hookline.delivery_log import DeliveryLog
from hookline.models import EndpointData, WebhookEndpoint
from hookline.ratelimit import InMemoryRateLimiter
from hookline.registry import WebhookRegistry
from hookline.service import WebhookService
from hookline.storage import MemoryStorage
from hookline.transport import Transport, TransportResponse
from hookline.webhooks import WebhookDispatcher

WEBHOOK_URL = "https://example.com/hooks/deploys"


class FakeTransport(Transport):
    """Scripted transport that records every POST.

    Each call consumes the next scripted outcome: a TransportResponse is
    returned, an exception is raised. When the script runs out, the
    default response (204, no body) is returned.
    """

    def __init__(self, *outcomes: TransportResponse | BaseException, delay: float = 0.0) -> None:
        self.outcomes: list[TransportResponse | BaseException] = list(outcomes)
        self.calls: list[dict[str, Any]] = []
        self.delay = delay
        self.closed = False

    async def post(
        self,
        url: str,
        json_body: Mapping[str, Any],
        timeout: float,
        headers: Mapping[str, str],
    ) -> TransportResponse:
        self.calls.append(
            {"url": url, "json": dict(json_body), "timeout": timeout, "headers": dict(headers)}
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        outcome = self.outcomes.pop(0) if self.outcomes else TransportResponse(204)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an in-memory, test-environment service."""
    return Settings(env="test", storage_backend="memory", log_format="text")


@pytest.fixture
def storage() -> MemoryStorage:
    """Fresh in-memory storage."""
    return MemoryStorage()


@pytest.fixture
def transport() -> FakeTransport:
    """Transport that answers 204 unless scripted otherwise."""
    return FakeTransport()


@pytest.fixture
def rate_limiter() -> InMemoryRateLimiter:
    """Rate limiter with a small limit so tests can exhaust it."""
    return InMemoryRateLimiter(max_requests=3, window_seconds=60)


@pytest.fixture
def registry(storage: MemoryStorage) -> WebhookRegistry:
    return WebhookRegistry(storage)


@pytest.fixture
def delivery_log(storage: MemoryStorage) -> DeliveryLog:
    return DeliveryLog(storage)


@pytest.fixture
def dispatcher(
    registry: WebhookRegistry,
    rate_limiter: InMemoryRateLimiter,
    delivery_log: DeliveryLog,
    transport: FakeTransport,
) -> WebhookDispatcher:
    """Dispatcher wired to in-memory collaborators."""
    return WebhookDispatcher(registry, rate_limiter, delivery_log, transport)


@pytest.fixture
async def endpoint(registry: WebhookRegistry) -> WebhookEndpoint:
    """An active webhook owned by user_1."""
    return await registry.register("user_1", EndpointData(url=WEBHOOK_URL, name="Deploys"))


@pytest.fixture
def service(
    storage: MemoryStorage,
    test_settings: Settings,
    transport: FakeTransport,
    rate_limiter: InMemoryRateLimiter,
) -> WebhookService:
    """WebhookService over in-memory storage and the fake transport."""
    return WebhookService(
        storage=storage,
        settings=test_settings,
        transport=transport,
        rate_limiter=rate_limiter,
    )
