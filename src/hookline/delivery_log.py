"""Delivery log and statistics.

Attempts are appended once and never modified. Stats are computed from
the stored attempts on every call, so they reflect every attempt whose
log write has completed.
"""

from __future__ import annotations

from hookline.logging import get_logger
from hookline.models import DeliveryAttempt, DeliveryStats
from hookline.storage import AttemptStore

logger = get_logger(__name__)


class DeliveryLog:
    """Append-only sink and query interface for delivery attempts."""

    def __init__(self, store: AttemptStore) -> None:
        self._store = store

    async def record(self, attempt: DeliveryAttempt) -> str:
        """Append an attempt to the log.

        Args:
            attempt: Completed attempt to persist.

        Returns:
            The attempt ID.
        """
        attempt_id = await self._store.insert_attempt(attempt)
        logger.debug(
            "Delivery attempt recorded",
            attempt_id=attempt_id,
            webhook_id=attempt.endpoint_id,
            success=attempt.success,
            status_code=attempt.status_code,
        )
        return attempt_id

    async def attempts_for(self, endpoint_id: str) -> list[DeliveryAttempt]:
        """All attempts for a webhook, newest first."""
        return await self._store.find_attempts_by_endpoint(endpoint_id)

    async def stats_for(self, endpoint_id: str) -> DeliveryStats:
        """Compute delivery stats for a webhook.

        success_rate is a percentage: 2 successes out of 3 gives 66.66...
        A webhook with no attempts has a success_rate of 0.

        Args:
            endpoint_id: Webhook to aggregate.

        Returns:
            DeliveryStats for every logged attempt.
        """
        attempts = await self._store.find_attempts_by_endpoint(endpoint_id)
        return DeliveryStats.from_attempts(attempts)


__all__ = ["DeliveryLog"]
