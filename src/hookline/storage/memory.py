"""In-memory storage backend.

Suitable for development, tests and single-process deployments that can
afford to lose webhooks and logs on restart. Stored models are copied on
the way in and out so callers never share mutable state with the store.
"""

from __future__ import annotations

import asyncio

from hookline.exceptions import NotFoundError
from hookline.models import DeliveryAttempt, ScheduledDelivery, WebhookEndpoint

from .base import HooklineStorage


class MemoryStorage(HooklineStorage):
    """Dict-backed implementation of every Hookline store."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._endpoints: dict[str, WebhookEndpoint] = {}
        self._attempts: list[DeliveryAttempt] = []
        self._schedules: dict[str, ScheduledDelivery] = {}

    async def insert_endpoint(self, endpoint: WebhookEndpoint) -> str:
        async with self._lock:
            self._endpoints[endpoint.id] = endpoint.model_copy(deep=True)
        return endpoint.id

    async def get_endpoint(self, endpoint_id: str) -> WebhookEndpoint | None:
        async with self._lock:
            endpoint = self._endpoints.get(endpoint_id)
            return endpoint.model_copy(deep=True) if endpoint else None

    async def update_endpoint(self, endpoint: WebhookEndpoint) -> None:
        async with self._lock:
            if endpoint.id not in self._endpoints:
                raise NotFoundError("webhook", endpoint.id)
            self._endpoints[endpoint.id] = endpoint.model_copy(deep=True)

    async def list_endpoints_by_owner(self, user_id: str) -> list[WebhookEndpoint]:
        async with self._lock:
            owned = [
                e.model_copy(deep=True) for e in self._endpoints.values() if e.user_id == user_id
            ]
        owned.sort(key=lambda e: e.created_at, reverse=True)
        return owned

    async def insert_attempt(self, attempt: DeliveryAttempt) -> str:
        # Attempts are frozen, no copy needed
        async with self._lock:
            self._attempts.append(attempt)
        return attempt.id

    async def find_attempts_by_endpoint(self, endpoint_id: str) -> list[DeliveryAttempt]:
        async with self._lock:
            found = [a for a in self._attempts if a.endpoint_id == endpoint_id]
        found.reverse()
        return found

    async def insert_schedule(self, schedule: ScheduledDelivery) -> str:
        async with self._lock:
            self._schedules[schedule.id] = schedule.model_copy(deep=True)
        return schedule.id

    async def get_schedule(self, schedule_id: str) -> ScheduledDelivery | None:
        async with self._lock:
            schedule = self._schedules.get(schedule_id)
            return schedule.model_copy(deep=True) if schedule else None

    async def update_schedule(self, schedule: ScheduledDelivery) -> None:
        async with self._lock:
            if schedule.id not in self._schedules:
                raise NotFoundError("scheduled_delivery", schedule.id)
            self._schedules[schedule.id] = schedule.model_copy(deep=True)

    async def list_schedules_by_endpoint(self, endpoint_id: str) -> list[ScheduledDelivery]:
        async with self._lock:
            found = [
                s.model_copy(deep=True)
                for s in self._schedules.values()
                if s.endpoint_id == endpoint_id
            ]
        found.sort(key=lambda s: s.created_at, reverse=True)
        return found


__all__ = ["MemoryStorage"]
