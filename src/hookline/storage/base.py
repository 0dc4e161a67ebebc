"""Storage interfaces for Hookline.

The delivery core only depends on these abstract stores. Backends
implement all three and add lifecycle management via HooklineStorage.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from hookline.models import DeliveryAttempt, ScheduledDelivery, WebhookEndpoint


class EndpointStore(ABC):
    """Persistence for webhook endpoints."""

    @abstractmethod
    async def insert_endpoint(self, endpoint: WebhookEndpoint) -> str:
        """Store a new endpoint and return its ID."""
        ...

    @abstractmethod
    async def get_endpoint(self, endpoint_id: str) -> WebhookEndpoint | None:
        """Fetch an endpoint by ID, or None if it doesn't exist."""
        ...

    @abstractmethod
    async def update_endpoint(self, endpoint: WebhookEndpoint) -> None:
        """Persist changes to an existing endpoint."""
        ...

    @abstractmethod
    async def list_endpoints_by_owner(self, user_id: str) -> list[WebhookEndpoint]:
        """List a user's endpoints, newest created first."""
        ...


class AttemptStore(ABC):
    """Append-only persistence for delivery attempts."""

    @abstractmethod
    async def insert_attempt(self, attempt: DeliveryAttempt) -> str:
        """Append an attempt and return its ID."""
        ...

    @abstractmethod
    async def find_attempts_by_endpoint(self, endpoint_id: str) -> list[DeliveryAttempt]:
        """All attempts logged for an endpoint, newest first."""
        ...


class ScheduleStore(ABC):
    """Persistence for scheduled deliveries."""

    @abstractmethod
    async def insert_schedule(self, schedule: ScheduledDelivery) -> str:
        """Store a new schedule and return its ID."""
        ...

    @abstractmethod
    async def get_schedule(self, schedule_id: str) -> ScheduledDelivery | None:
        """Fetch a schedule by ID, or None if it doesn't exist."""
        ...

    @abstractmethod
    async def update_schedule(self, schedule: ScheduledDelivery) -> None:
        """Persist changes to an existing schedule."""
        ...

    @abstractmethod
    async def list_schedules_by_endpoint(self, endpoint_id: str) -> list[ScheduledDelivery]:
        """List schedules targeting an endpoint, newest created first."""
        ...


class HooklineStorage(EndpointStore, AttemptStore, ScheduleStore):
    """A complete storage backend with lifecycle hooks."""

    async def initialize(self) -> None:  # noqa: B027
        """Prepare the backend (connections, collections). No-op by default."""

    async def close(self) -> None:  # noqa: B027
        """Release backend resources. No-op by default."""

    async def __aenter__(self) -> HooklineStorage:
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()


__all__ = [
    "AttemptStore",
    "EndpointStore",
    "HooklineStorage",
    "ScheduleStore",
]
