"""Webhook delivery: admission, send, and guaranteed logging.

One call to WebhookDispatcher.send() moves through these states:

    STARTING -> ADMITTED -> SENDING -> SUCCEEDED | FAILED -> LOGGED

Lookup, inactive and rate-limit failures stop before ADMITTED and leave
no trace in the delivery log. Once admitted, exactly one DeliveryAttempt
is written whatever the send does, and only then is the result returned
or the error re-raised.
"""

from __future__ import annotations

import asyncio
import time
from enum import Enum
from types import TracebackType
from typing import TYPE_CHECKING, Any

from hookline.config import DEFAULT_USER_AGENT
from hookline.exceptions import (
    HooklineError,
    InactiveEndpointError,
    RateLimitExceededError,
    TransportError,
)
from hookline.logging import delivery_context, get_logger
from hookline.models import (
    SUCCESS_MESSAGE,
    DeliveryAttempt,
    DeliveryOptions,
    WebhookEndpoint,
    WebhookMessage,
)
from hookline.payload import build_payload

if TYPE_CHECKING:
    from hookline.delivery_log import DeliveryLog
    from hookline.ratelimit import RateLimiter
    from hookline.registry import WebhookRegistry
    from hookline.transport import Transport

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class DeliveryState(str, Enum):
    """Stages of a single delivery."""

    STARTING = "starting"
    ADMITTED = "admitted"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    LOGGED = "logged"


def _error_message(exc: BaseException) -> str:
    if isinstance(exc, HooklineError):
        return exc.message
    if isinstance(exc, asyncio.CancelledError):
        return "Delivery cancelled"
    return str(exc) or exc.__class__.__name__


class AttemptRecorder:
    """Writes exactly one DeliveryAttempt when the send block exits.

    Wraps the send step of an admitted delivery. Elapsed time runs from
    entering the block to leaving it. On exit, normal or exceptional, the
    attempt is built from what the block reported and recorded; the
    exception, if any, then continues to propagate.

    Example:
        ```python
        async with AttemptRecorder(log, endpoint.id, message) as recorder:
            response = await transport.post(...)
            recorder.status_code = response.status_code
        ```
    """

    def __init__(
        self,
        delivery_log: DeliveryLog,
        endpoint_id: str,
        message: WebhookMessage,
    ) -> None:
        self._log = delivery_log
        self.endpoint_id = endpoint_id
        self.message = message
        self.state = DeliveryState.ADMITTED
        self.status_code: int | None = None
        self.attempt: DeliveryAttempt | None = None
        self._started = 0.0

    async def __aenter__(self) -> AttemptRecorder:
        self.state = DeliveryState.SENDING
        self._started = time.perf_counter()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        elapsed_ms = int((time.perf_counter() - self._started) * 1000)

        if exc is None:
            self.state = DeliveryState.SUCCEEDED
            outcome = SUCCESS_MESSAGE
        else:
            self.state = DeliveryState.FAILED
            outcome = _error_message(exc)
            if self.status_code is None and isinstance(exc, TransportError):
                self.status_code = exc.status_code

        self.attempt = DeliveryAttempt(
            endpoint_id=self.endpoint_id,
            success=exc is None,
            status_code=self.status_code,
            response_time_ms=elapsed_ms,
            message=outcome,
            payload=self.message.to_record(),
        )
        await self._log.record(self.attempt)
        self.state = DeliveryState.LOGGED

        if exc is None:
            logger.info(
                "Webhook delivered",
                webhook_id=self.endpoint_id,
                status_code=self.status_code,
                response_time_ms=elapsed_ms,
            )
        else:
            logger.warning(
                "Webhook delivery failed",
                webhook_id=self.endpoint_id,
                status_code=self.status_code,
                response_time_ms=elapsed_ms,
                error=outcome,
            )

        # Never suppress: the caller sees the original error after logging
        return False


class WebhookDispatcher:
    """Delivers messages to registered webhook endpoints.

    Handles:
    - Resolving the endpoint and refusing inactive ones
    - Per-endpoint admission control via the rate limiter
    - Building the wire payload and POSTing it with a hard timeout
    - Logging exactly one attempt for every admitted delivery

    Deliveries are independent: many may run concurrently for the same or
    different endpoints. Admitted deliveries run as shielded tasks, so
    cancelling the caller does not abandon an attempt before it is logged.

    Example:
        ```python
        dispatcher = WebhookDispatcher(registry, limiter, delivery_log, HttpxTransport())
        body = await dispatcher.send(webhook_id, WebhookMessage(content="hello"))
        ```
    """

    def __init__(
        self,
        registry: WebhookRegistry,
        rate_limiter: RateLimiter,
        delivery_log: DeliveryLog,
        transport: Transport,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        response_body_max_chars: int = 1000,
    ) -> None:
        """Initialize the webhook dispatcher.

        Args:
            registry: Endpoint lookup.
            rate_limiter: Admission control, shared by every caller of this dispatcher.
            delivery_log: Sink for delivery attempts.
            transport: HTTP POST capability.
            timeout_seconds: Hard deadline for each outbound request.
            user_agent: User-Agent header value.
            response_body_max_chars: Text bodies attached to errors are truncated to this.
        """
        self._registry = registry
        self._rate_limiter = rate_limiter
        self._log = delivery_log
        self._transport = transport
        self._timeout = timeout_seconds
        self._headers = {
            "Content-Type": "application/json",
            "User-Agent": user_agent,
        }
        self._body_max_chars = response_body_max_chars
        self._inflight: set[asyncio.Task[Any]] = set()

    @property
    def headers(self) -> dict[str, str]:
        """Headers sent with every delivery."""
        return dict(self._headers)

    @property
    def inflight_count(self) -> int:
        """Admitted deliveries that have not finished logging."""
        return len(self._inflight)

    async def send(
        self,
        endpoint_id: str,
        message: WebhookMessage,
        options: DeliveryOptions | None = None,
    ) -> Any:
        """Deliver a message to one webhook.

        Args:
            endpoint_id: Target webhook.
            message: Content and embeds to send.
            options: Username, avatar and tts overrides.

        Returns:
            The endpoint's response body (parsed JSON, text, or None).

        Raises:
            NotFoundError: Unknown webhook. Nothing is logged.
            InactiveEndpointError: Webhook is disabled. Nothing is logged.
            RateLimitExceededError: Admission refused. Nothing is logged.
            TransportError: The send failed (DeliveryTimeoutError on timeout).
                A failed attempt has been logged before this is raised.
        """
        with delivery_context(webhook_id=endpoint_id):
            endpoint = await self._registry.lookup(endpoint_id)

            if not endpoint.is_active:
                logger.info("Delivery refused: webhook inactive")
                raise InactiveEndpointError(endpoint_id)

            if not self._rate_limiter.admit(endpoint_id):
                retry_after = self._rate_limiter.retry_after(endpoint_id)
                logger.warning("Delivery refused: rate limit exceeded", retry_after=retry_after)
                raise RateLimitExceededError(endpoint_id, retry_after)

            # The attempt task copies the current context, webhook_id included.
            task = asyncio.ensure_future(self._deliver(endpoint, message, options))
            self._inflight.add(task)
            task.add_done_callback(self._attempt_finished)
            return await asyncio.shield(task)

    def _attempt_finished(self, task: asyncio.Task[Any]) -> None:
        self._inflight.discard(task)
        # Mark the outcome retrieved; it is already in the delivery log even
        # if the caller went away before awaiting it.
        if not task.cancelled():
            task.exception()

    def _truncate(self, body: Any) -> Any:
        if isinstance(body, str):
            return body[: self._body_max_chars]
        return body

    async def _deliver(
        self,
        endpoint: WebhookEndpoint,
        message: WebhookMessage,
        options: DeliveryOptions | None,
    ) -> Any:
        """Send an admitted delivery and log its outcome."""
        payload = build_payload(message, options).to_wire()

        async with AttemptRecorder(self._log, endpoint.id, message) as recorder:
            response = await self._transport.post(
                endpoint.url,
                payload,
                timeout=self._timeout,
                headers=self._headers,
            )
            recorder.status_code = response.status_code

            if not response.is_success:
                raise TransportError(
                    f"Request failed with status code {response.status_code}",
                    status_code=response.status_code,
                    response_body=self._truncate(response.body),
                )

        return response.body

    async def wait_idle(self) -> None:
        """Wait until every admitted delivery has been logged."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "AttemptRecorder",
    "DeliveryState",
    "WebhookDispatcher",
]
