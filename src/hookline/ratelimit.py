"""Per-endpoint admission control for webhook deliveries.

Provides a sliding-window rate limiter keyed by webhook ID. State lives
in process memory only: a restart resets every window.
"""

from __future__ import annotations

import math
import threading
import time
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Callable

from hookline.logging import get_logger

logger = get_logger(__name__)


class RateLimiter(ABC):
    """Abstract base class for delivery rate limiters.

    admit() must be a linearizable check-and-increment per endpoint:
    with K free slots, at most K of any number of concurrent calls
    for the same endpoint return True.
    """

    @abstractmethod
    def admit(self, endpoint_id: str) -> bool:
        """Decide whether a delivery to this endpoint may proceed now.

        Records the delivery against the endpoint's window when admitted.

        Args:
            endpoint_id: Webhook the delivery targets.

        Returns:
            True if admitted, False if the limit is reached.
        """
        ...

    @abstractmethod
    def retry_after(self, endpoint_id: str) -> int:
        """Seconds until the endpoint has a free slot (0 if it has one now)."""
        ...

    @abstractmethod
    def reset(self, endpoint_id: str | None = None) -> None:
        """Forget recorded admissions for one endpoint, or for all of them."""
        ...


class InMemoryRateLimiter(RateLimiter):
    """In-memory rate limiter using a sliding window.

    Admits at most ``max_requests`` deliveries per endpoint within any
    rolling window of ``window_seconds``. The check and the recording of
    an admission happen under one lock with no await in between, so the
    limiter is safe for concurrent coroutines and threads alike.
    """

    def __init__(
        self,
        max_requests: int = 30,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # Structure: {endpoint_id: deque[admission timestamp]}, oldest first.
        # Endpoints with no admission inside the window have no entry.
        self._admissions: dict[str, deque[float]] = {}

    def _prune(self, endpoint_id: str, now: float) -> deque[float] | None:
        """Drop admissions that have left the window. Caller holds the lock."""
        admissions = self._admissions.get(endpoint_id)
        if admissions is None:
            return None

        window_start = now - self.window_seconds
        while admissions and admissions[0] <= window_start:
            admissions.popleft()

        if not admissions:
            del self._admissions[endpoint_id]
            return None
        return admissions

    def admit(self, endpoint_id: str) -> bool:
        with self._lock:
            now = self._clock()
            admissions = self._prune(endpoint_id, now)

            if admissions is not None and len(admissions) >= self.max_requests:
                logger.debug(
                    "Delivery refused by rate limiter",
                    webhook_id=endpoint_id,
                    limit=self.max_requests,
                    window_seconds=self.window_seconds,
                )
                return False

            self._admissions.setdefault(endpoint_id, deque()).append(now)
            return True

    def retry_after(self, endpoint_id: str) -> int:
        with self._lock:
            now = self._clock()
            admissions = self._prune(endpoint_id, now)
            if admissions is None or len(admissions) < self.max_requests:
                return 0
            return max(1, math.ceil(admissions[0] + self.window_seconds - now))

    def remaining(self, endpoint_id: str) -> int:
        """Number of deliveries the endpoint may still make in the current window."""
        with self._lock:
            admissions = self._prune(endpoint_id, self._clock())
            return max(0, self.max_requests - len(admissions or ()))

    @property
    def tracked_endpoints(self) -> int:
        """Endpoints currently holding admission state."""
        with self._lock:
            return len(self._admissions)

    def reset(self, endpoint_id: str | None = None) -> None:
        with self._lock:
            if endpoint_id is None:
                self._admissions.clear()
            else:
                self._admissions.pop(endpoint_id, None)


__all__ = [
    "InMemoryRateLimiter",
    "RateLimiter",
]
