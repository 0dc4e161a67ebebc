"""Data models for Hookline.

Endpoint Types:
    - WebhookEndpoint: A registered delivery target
    - EndpointData: Raw registration input

Message Types:
    - WebhookMessage: Caller-supplied content and embeds
    - DeliveryOptions: Per-delivery presentation overrides
    - WebhookPayload: JSON body sent on the wire
    - Embed and its parts: Structured rich content

Delivery Types:
    - DeliveryAttempt: Immutable log entry for an admitted delivery
    - DeliveryStats: Derived success/failure counts
    - ScheduledDelivery: Message stored for an external scheduler to trigger
"""

from .base import generate_id, utc_now
from .delivery import SUCCESS_MESSAGE, DeliveryAttempt, DeliveryStats
from .endpoint import EndpointData, WebhookEndpoint
from .message import (
    DeliveryOptions,
    Embed,
    EmbedAuthor,
    EmbedField,
    EmbedFooter,
    EmbedMedia,
    WebhookMessage,
    WebhookPayload,
)
from .schedule import ScheduledDelivery

__all__ = [
    # Helpers
    "generate_id",
    "utc_now",
    # Endpoints
    "EndpointData",
    "WebhookEndpoint",
    # Messages
    "DeliveryOptions",
    "Embed",
    "EmbedAuthor",
    "EmbedField",
    "EmbedFooter",
    "EmbedMedia",
    "WebhookMessage",
    "WebhookPayload",
    # Delivery
    "SUCCESS_MESSAGE",
    "DeliveryAttempt",
    "DeliveryStats",
    "ScheduledDelivery",
]
