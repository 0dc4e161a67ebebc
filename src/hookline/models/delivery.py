"""Delivery log models.

A DeliveryAttempt is written once for every delivery that passed
admission, whether the send succeeded or not. DeliveryStats is derived
from those entries on demand and never stored.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .base import generate_id, utc_now

SUCCESS_MESSAGE = "Webhook sent successfully"


class DeliveryAttempt(BaseModel):
    """Record of one admitted webhook delivery.

    Immutable once created; the delivery log only ever appends these.

    Attributes:
        id: Unique identifier for this attempt.
        endpoint_id: Webhook the delivery was sent to.
        success: True if the endpoint answered with a 2xx status.
        status_code: HTTP status code, absent if no response was received.
        response_time_ms: Wall-clock time spent in the send call.
        message: Outcome description (success text or the error message).
        payload: The caller's original message, not the wire payload.
        timestamp: When the attempt was logged.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(default_factory=lambda: generate_id("att"))
    endpoint_id: str = Field(description="Webhook the delivery was sent to")
    success: bool = Field(description="Whether the endpoint accepted the delivery")
    status_code: int | None = Field(default=None, description="HTTP response status code")
    response_time_ms: int = Field(ge=0, description="Time spent sending, in milliseconds")
    message: str = Field(description="Human-readable outcome")
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Caller's original message",
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the attempt was logged",
    )


class DeliveryStats(BaseModel):
    """Aggregate delivery outcomes for one webhook.

    Attributes:
        total: Number of logged attempts.
        successful: Attempts with success=True.
        failed: total - successful.
        success_rate: successful / total as a percentage (0 when total is 0).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    total: int = Field(ge=0)
    successful: int = Field(ge=0)
    failed: int = Field(ge=0)
    success_rate: float = Field(ge=0.0, le=100.0)

    @classmethod
    def from_attempts(cls, attempts: list[DeliveryAttempt]) -> "DeliveryStats":
        """Compute stats from a list of attempts."""
        total = len(attempts)
        successful = sum(1 for attempt in attempts if attempt.success)
        return cls(
            total=total,
            successful=successful,
            failed=total - successful,
            success_rate=(successful / total) * 100 if total > 0 else 0.0,
        )


__all__ = [
    "SUCCESS_MESSAGE",
    "DeliveryAttempt",
    "DeliveryStats",
]
