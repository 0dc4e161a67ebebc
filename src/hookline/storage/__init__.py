"""Storage backends for Hookline.

The delivery core talks to the abstract stores in ``base``. Two
backends are provided: MemoryStorage for development and tests, and
QdrantStorage for persistent deployments.

Example:
    ```python
    from hookline.storage import create_storage

    async with create_storage(settings) as storage:
        await storage.insert_endpoint(endpoint)
    ```
"""

from hookline.config import Settings
from hookline.exceptions import ConfigurationError

from .base import AttemptStore, EndpointStore, HooklineStorage, ScheduleStore
from .memory import MemoryStorage
from .qdrant import COLLECTIONS, QdrantStorage


def create_storage(settings: Settings) -> HooklineStorage:
    """Build the storage backend selected by settings.storage_backend."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "qdrant":
        return QdrantStorage(
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key,
            prefix=settings.collection_prefix,
            scroll_limit=settings.storage_max_scroll_limit,
        )
    raise ConfigurationError(f"Unknown storage backend: {settings.storage_backend}")


__all__ = [
    "COLLECTIONS",
    "AttemptStore",
    "EndpointStore",
    "HooklineStorage",
    "MemoryStorage",
    "QdrantStorage",
    "ScheduleStore",
    "create_storage",
]
