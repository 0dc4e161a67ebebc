"""Scheduled delivery model.

Hookline does not run schedules itself. An external job scheduler reads
the schedule expression and calls WebhookService.trigger_scheduled()
when a delivery is due.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .base import generate_id, utc_now
from .message import DeliveryOptions, WebhookMessage


class ScheduledDelivery(BaseModel):
    """A message to be delivered to a webhook on a schedule.

    Attributes:
        id: Unique identifier for this schedule.
        endpoint_id: Webhook to deliver to.
        user_id: Owner of the webhook.
        schedule: Schedule expression, interpreted by the external scheduler.
        message: Message sent on each trigger.
        options: Delivery options applied on each trigger.
        created_at: When the schedule was created.
        last_triggered_at: When a delivery was last attempted for this schedule.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=lambda: generate_id("sch"))
    endpoint_id: str = Field(description="Webhook to deliver to")
    user_id: str = Field(description="Owner of the webhook")
    schedule: str = Field(min_length=1, description="Schedule expression (e.g. cron)")
    message: WebhookMessage = Field(description="Message sent on each trigger")
    options: DeliveryOptions = Field(
        default_factory=DeliveryOptions,
        description="Delivery options applied on each trigger",
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the schedule was created",
    )
    last_triggered_at: datetime | None = Field(
        default=None,
        description="When a delivery was last attempted",
    )

    def mark_triggered(self) -> "ScheduledDelivery":
        """Record that a delivery was just attempted."""
        self.last_triggered_at = utc_now()
        return self


__all__ = ["ScheduledDelivery"]
