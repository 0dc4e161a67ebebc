"""Qdrant storage backend.

Stores webhooks, delivery attempts and schedules as payload-only points.
No semantic search is needed, so every point carries a one-dimensional
zero vector and all queries are payload filters.

Example:
    ```python
    from hookline.storage import QdrantStorage

    async with QdrantStorage(url="http://localhost:6333") as storage:
        await storage.insert_endpoint(endpoint)
        attempts = await storage.find_attempts_by_endpoint(endpoint.id)
    ```
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from pydantic import BaseModel
from qdrant_client import AsyncQdrantClient, models

from hookline.config import settings
from hookline.exceptions import HooklineError, NotFoundError, StorageError
from hookline.logging import get_logger
from hookline.models import DeliveryAttempt, ScheduledDelivery, WebhookEndpoint

from .base import HooklineStorage
from .retry import qdrant_retry

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", WebhookEndpoint, DeliveryAttempt, ScheduledDelivery)

# Collection suffixes and the payload fields each one is filtered on
COLLECTIONS: dict[str, tuple[str, ...]] = {
    "endpoints": ("user_id",),
    "attempts": ("endpoint_id",),
    "schedules": ("endpoint_id",),
}

VECTOR_SIZE = 1
_ZERO_VECTOR = [0.0] * VECTOR_SIZE


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise backend failures as StorageError."""
    try:
        yield
    except HooklineError:
        raise
    except Exception as e:
        logger.error("Qdrant operation failed", operation=operation, error=str(e))
        raise StorageError(f"{operation} failed: {e}") from e


class QdrantStorage(HooklineStorage):
    """Hookline storage backed by a Qdrant collection per record type."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        prefix: str | None = None,
        scroll_limit: int | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize storage client.

        Args:
            url: Qdrant server URL. Defaults to settings.qdrant_url.
            api_key: Qdrant API key. Defaults to settings.qdrant_api_key.
            prefix: Collection name prefix. Defaults to settings.collection_prefix.
            scroll_limit: Page size for scroll queries.
            client: Pre-built client (e.g. ``AsyncQdrantClient(location=":memory:")``).
        """
        self._url = url or settings.qdrant_url
        self._api_key = api_key or settings.qdrant_api_key
        self._prefix = prefix or settings.collection_prefix
        self._scroll_limit = scroll_limit or settings.storage_max_scroll_limit
        self._client = client
        self._collections_initialized = False

    @property
    def client(self) -> AsyncQdrantClient:
        """Get the Qdrant client, raising if not initialized."""
        if self._client is None:
            raise RuntimeError("Storage not initialized. Call initialize() first.")
        return self._client

    async def initialize(self) -> None:
        """Create the client if needed and ensure collections exist."""
        if self._client is None:
            self._client = AsyncQdrantClient(url=self._url, api_key=self._api_key)
        with _storage_errors("initialize"):
            await self._ensure_collections()
        self._collections_initialized = True

    async def close(self) -> None:
        """Close the storage client connection."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            self._collections_initialized = False

    def _collection_name(self, kind: str) -> str:
        """Get full collection name with prefix."""
        return f"{self._prefix}_{kind}"

    @staticmethod
    def _point_id(kind: str, record_id: str) -> str:
        """Convert a record ID to a valid Qdrant point ID.

        Qdrant requires point IDs to be UUIDs or unsigned integers.
        We hash the key to create a deterministic UUID-format string.
        """
        h = hashlib.sha256(f"{kind}/{record_id}".encode()).hexdigest()[:32]
        return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:32]}"

    async def _ensure_collections(self) -> None:
        """Ensure all required collections exist with payload indexes."""
        existing = {c.name for c in (await self.client.get_collections()).collections}

        for kind, indexed_fields in COLLECTIONS.items():
            collection_name = self._collection_name(kind)
            if collection_name in existing:
                continue

            await self.client.create_collection(
                collection_name=collection_name,
                vectors_config=models.VectorParams(
                    size=VECTOR_SIZE,
                    distance=models.Distance.DOT,
                ),
            )
            for field_name in indexed_fields:
                await self.client.create_payload_index(
                    collection_name=collection_name,
                    field_name=field_name,
                    field_schema=models.PayloadSchemaType.KEYWORD,
                )
            logger.info("Created Qdrant collection", collection=collection_name)

    @qdrant_retry
    async def _upsert(self, kind: str, record_id: str, record: BaseModel) -> None:
        await self.client.upsert(
            collection_name=self._collection_name(kind),
            points=[
                models.PointStruct(
                    id=self._point_id(kind, record_id),
                    vector=_ZERO_VECTOR,
                    payload=record.model_dump(mode="json"),
                )
            ],
        )

    @qdrant_retry
    async def _retrieve(
        self, kind: str, record_id: str, record_class: type[RecordT]
    ) -> RecordT | None:
        results = await self.client.retrieve(
            collection_name=self._collection_name(kind),
            ids=[self._point_id(kind, record_id)],
            with_payload=True,
        )
        if not results or results[0].payload is None:
            return None
        return record_class.model_validate(results[0].payload)

    @qdrant_retry
    async def _scroll_all(
        self, kind: str, field_name: str, value: str, record_class: type[RecordT]
    ) -> list[RecordT]:
        """Read every record whose payload field matches, across all pages."""
        scroll_filter = models.Filter(
            must=[
                models.FieldCondition(
                    key=field_name,
                    match=models.MatchValue(value=value),
                )
            ]
        )

        records: list[RecordT] = []
        offset: Any = None
        while True:
            points, offset = await self.client.scroll(
                collection_name=self._collection_name(kind),
                scroll_filter=scroll_filter,
                limit=self._scroll_limit,
                offset=offset,
                with_payload=True,
            )
            records.extend(
                record_class.model_validate(p.payload) for p in points if p.payload is not None
            )
            if offset is None:
                return records

    # Endpoints

    async def insert_endpoint(self, endpoint: WebhookEndpoint) -> str:
        with _storage_errors("insert_endpoint"):
            await self._upsert("endpoints", endpoint.id, endpoint)
        return endpoint.id

    async def get_endpoint(self, endpoint_id: str) -> WebhookEndpoint | None:
        with _storage_errors("get_endpoint"):
            return await self._retrieve("endpoints", endpoint_id, WebhookEndpoint)

    async def update_endpoint(self, endpoint: WebhookEndpoint) -> None:
        with _storage_errors("update_endpoint"):
            if await self._retrieve("endpoints", endpoint.id, WebhookEndpoint) is None:
                raise NotFoundError("webhook", endpoint.id)
            await self._upsert("endpoints", endpoint.id, endpoint)

    async def list_endpoints_by_owner(self, user_id: str) -> list[WebhookEndpoint]:
        with _storage_errors("list_endpoints_by_owner"):
            endpoints = await self._scroll_all("endpoints", "user_id", user_id, WebhookEndpoint)
        endpoints.sort(key=lambda e: e.created_at, reverse=True)
        return endpoints

    # Delivery attempts

    async def insert_attempt(self, attempt: DeliveryAttempt) -> str:
        with _storage_errors("insert_attempt"):
            await self._upsert("attempts", attempt.id, attempt)
        return attempt.id

    async def find_attempts_by_endpoint(self, endpoint_id: str) -> list[DeliveryAttempt]:
        with _storage_errors("find_attempts_by_endpoint"):
            attempts = await self._scroll_all(
                "attempts", "endpoint_id", endpoint_id, DeliveryAttempt
            )
        attempts.sort(key=lambda a: a.timestamp, reverse=True)
        return attempts

    # Schedules

    async def insert_schedule(self, schedule: ScheduledDelivery) -> str:
        with _storage_errors("insert_schedule"):
            await self._upsert("schedules", schedule.id, schedule)
        return schedule.id

    async def get_schedule(self, schedule_id: str) -> ScheduledDelivery | None:
        with _storage_errors("get_schedule"):
            return await self._retrieve("schedules", schedule_id, ScheduledDelivery)

    async def update_schedule(self, schedule: ScheduledDelivery) -> None:
        with _storage_errors("update_schedule"):
            if await self._retrieve("schedules", schedule.id, ScheduledDelivery) is None:
                raise NotFoundError("scheduled_delivery", schedule.id)
            await self._upsert("schedules", schedule.id, schedule)

    async def list_schedules_by_endpoint(self, endpoint_id: str) -> list[ScheduledDelivery]:
        with _storage_errors("list_schedules_by_endpoint"):
            schedules = await self._scroll_all(
                "schedules", "endpoint_id", endpoint_id, ScheduledDelivery
            )
        schedules.sort(key=lambda s: s.created_at, reverse=True)
        return schedules


__all__ = [
    "COLLECTIONS",
    "QdrantStorage",
]
