"""Webhook endpoint models.

A WebhookEndpoint is a registered delivery target. EndpointData is the
raw registration input, checked by hookline.validation before an
endpoint is created from it.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .base import generate_id, utc_now


class EndpointData(BaseModel):
    """Registration input for a webhook endpoint.

    Fields are plain strings so that the validation rules, rather than
    model parsing, decide what is acceptable and report every problem.
    """

    model_config = ConfigDict(extra="forbid")

    url: str | None = Field(default=None, description="Target URL for deliveries")
    name: str | None = Field(default=None, description="Human-readable label")
    description: str | None = Field(default=None, description="Optional notes")


class WebhookEndpoint(BaseModel):
    """A registered webhook endpoint.

    Attributes:
        id: Unique identifier for this webhook.
        user_id: User who owns this webhook.
        url: Endpoint that receives POSTed payloads.
        name: Optional human-readable label.
        description: Optional notes.
        is_active: Whether deliveries are allowed.
        created_at: When the webhook was registered.
        updated_at: When the webhook was last modified.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=lambda: generate_id("whk"))
    user_id: str = Field(description="User who owns this webhook")
    url: str = Field(min_length=1, description="Endpoint that receives deliveries")
    name: str | None = Field(default=None, description="Human-readable label")
    description: str | None = Field(default=None, description="Optional notes")
    is_active: bool = Field(default=True, description="Whether deliveries are allowed")
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the webhook was registered",
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        description="When the webhook was last modified",
    )

    @classmethod
    def from_data(cls, user_id: str, data: EndpointData) -> "WebhookEndpoint":
        """Build an active endpoint from validated registration data."""
        now = utc_now()
        return cls(
            user_id=user_id,
            url=(data.url or "").strip(),
            name=data.name,
            description=data.description,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    def touch(self) -> "WebhookEndpoint":
        """Bump updated_at to now."""
        self.updated_at = utc_now()
        return self


__all__ = [
    "EndpointData",
    "WebhookEndpoint",
]
