"""Retry utilities for storage operations.

Provides exponential backoff retry logic for transient network errors
when communicating with Qdrant. Webhook deliveries themselves are never
retried; this only covers reads and writes of stored records.
"""

from __future__ import annotations

import httpx
from qdrant_client.http.exceptions import UnexpectedResponse
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from hookline.logging import get_logger

logger = get_logger(__name__)


def _is_transient(exc: BaseException) -> bool:
    """Connection failures, timeouts and 5xx responses are worth retrying."""
    if isinstance(exc, httpx.ConnectError | httpx.TimeoutException):
        return True
    if isinstance(exc, UnexpectedResponse):
        return exc.status_code is not None and exc.status_code >= 500
    return False


def _log_retry(retry_state: RetryCallState) -> None:
    """Log retry attempts with context."""
    logger.warning(
        "Retrying Qdrant operation",
        attempt=retry_state.attempt_number,
        fn_name=retry_state.fn.__name__ if retry_state.fn else "unknown",
        exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


qdrant_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception(_is_transient),
    before_sleep=_log_retry,
    reraise=True,
)
