"""Hookline: outbound webhooks you can account for.

Registers webhook endpoints, delivers messages to them under per-endpoint
rate limits, and logs every admitted delivery so success rates are exact.

Quick Start:
    from hookline.service import WebhookService

    async with WebhookService.create() as hooks:
        webhook = await hooks.create_webhook(
            "user_123", {"url": "https://example.com/hooks/deploys"}
        )
        await hooks.send_webhook(webhook.id, {"content": "Deploy finished"})
        stats = await hooks.get_webhook_stats(webhook.id)

Delivery contract:
    - Unknown, inactive or rate-limited webhooks are refused before sending
      and nothing is logged
    - Every delivery that is sent is logged exactly once, then its result is
      returned or its error re-raised
"""

__version__ = "0.1.0"

# Configuration
from .config import Settings, settings

# Exceptions
from .exceptions import (
    ConfigurationError,
    DeliveryTimeoutError,
    HooklineError,
    InactiveEndpointError,
    NotFoundError,
    PreAdmissionError,
    RateLimitExceededError,
    StorageError,
    TransportError,
    ValidationError,
)

# Logging
from .logging import configure_logging, delivery_context, get_logger

# Models
from .models import (
    DeliveryAttempt,
    DeliveryOptions,
    DeliveryStats,
    Embed,
    EndpointData,
    ScheduledDelivery,
    WebhookEndpoint,
    WebhookMessage,
    WebhookPayload,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "Settings",
    "settings",
    # Exceptions
    "ConfigurationError",
    "DeliveryTimeoutError",
    "HooklineError",
    "InactiveEndpointError",
    "NotFoundError",
    "PreAdmissionError",
    "RateLimitExceededError",
    "StorageError",
    "TransportError",
    "ValidationError",
    # Logging
    "configure_logging",
    "delivery_context",
    "get_logger",
    # Models
    "DeliveryAttempt",
    "DeliveryOptions",
    "DeliveryStats",
    "Embed",
    "EndpointData",
    "ScheduledDelivery",
    "WebhookEndpoint",
    "WebhookMessage",
    "WebhookPayload",
]
