"""Webhook delivery for Hookline.

Provides rate-limited webhook delivery with a guaranteed delivery log entry
for every admitted attempt.

Example:
    ```python
    from hookline.webhooks import WebhookDispatcher

    dispatcher = WebhookDispatcher(registry, rate_limiter, delivery_log, transport)
    body = await dispatcher.send("whk_abc123", WebhookMessage(content="hello"))
    ```
"""

from .dispatcher import (
    DEFAULT_TIMEOUT_SECONDS,
    AttemptRecorder,
    DeliveryState,
    WebhookDispatcher,
)

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "AttemptRecorder",
    "DeliveryState",
    "WebhookDispatcher",
]
