"""Hookline service layer.

WebhookService wires storage, the registry, the rate limiter, the
delivery log and the dispatcher together behind one interface.

Example:
    ```python
    from hookline.service import WebhookService

    async with WebhookService.create() as hooks:
        webhook = await hooks.create_webhook(
            "user_123", {"url": "https://discord.com/api/webhooks/1/abc"}
        )
        await hooks.send_webhook(webhook.id, {"content": "Deploy finished"})
        stats = await hooks.get_webhook_stats(webhook.id)
        print(f"{stats.success_rate:.1f}% delivered")
    ```
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from hookline.config import Settings
from hookline.delivery_log import DeliveryLog
from hookline.exceptions import NotFoundError, PreAdmissionError, ValidationError
from hookline.logging import configure_logging, delivery_context, get_logger
from hookline.models import (
    DeliveryAttempt,
    DeliveryOptions,
    DeliveryStats,
    EndpointData,
    ScheduledDelivery,
    WebhookEndpoint,
    WebhookMessage,
)
from hookline.ratelimit import InMemoryRateLimiter, RateLimiter
from hookline.registry import WebhookRegistry
from hookline.storage import HooklineStorage, create_storage
from hookline.transport import HttpxTransport, Transport
from hookline.webhooks import WebhookDispatcher

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(
    model_class: type[ModelT],
    value: ModelT | Mapping[str, Any] | None,
    label: str,
) -> ModelT:
    """Accept a model instance or a plain mapping for caller convenience."""
    if isinstance(value, model_class):
        return value
    try:
        return model_class.model_validate(dict(value or {}))
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or label}: {err['msg']}"
            for err in e.errors()
        ]
        raise ValidationError(errors, prefix=f"Invalid {label}") from e


@dataclass
class WebhookService:
    """High-level webhook service.

    This service provides:
    - create_webhook() / get_user_webhooks(): endpoint registration and listing
    - activate_webhook() / deactivate_webhook() / update_webhook_url(): lifecycle
    - send_webhook(): rate-limited delivery with a guaranteed log entry
    - get_webhook_stats() / get_delivery_logs(): delivery outcomes
    - schedule_webhook() / trigger_scheduled(): hooks for an external scheduler

    Uses dependency injection for storage, transport and rate limiting,
    making it easy to test and configure.

    Attributes:
        storage: Storage backend (memory or Qdrant).
        settings: Configuration settings.
        transport: HTTP transport (defaults to HttpxTransport).
        rate_limiter: Admission control (defaults to InMemoryRateLimiter from settings).
    """

    storage: HooklineStorage
    settings: Settings
    transport: Transport = field(default_factory=HttpxTransport)
    rate_limiter: RateLimiter | None = None

    registry: WebhookRegistry = field(init=False, repr=False)
    delivery_log: DeliveryLog = field(init=False, repr=False)
    dispatcher: WebhookDispatcher = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Build the delivery pipeline from the injected collaborators."""
        if self.rate_limiter is None:
            self.rate_limiter = InMemoryRateLimiter(
                max_requests=self.settings.rate_limit_max_requests,
                window_seconds=self.settings.rate_limit_window_seconds,
            )
        self.registry = WebhookRegistry(self.storage)
        self.delivery_log = DeliveryLog(self.storage)
        self.dispatcher = WebhookDispatcher(
            registry=self.registry,
            rate_limiter=self.rate_limiter,
            delivery_log=self.delivery_log,
            transport=self.transport,
            timeout_seconds=self.settings.delivery_timeout_seconds,
            user_agent=self.settings.user_agent,
            response_body_max_chars=self.settings.response_body_max_chars,
        )

    @classmethod
    def create(cls, settings: Settings | None = None) -> WebhookService:
        """Create a WebhookService with default dependencies.

        Args:
            settings: Optional settings. Uses defaults if None.

        Returns:
            Configured WebhookService instance.
        """
        if settings is None:
            settings = Settings()

        configure_logging(level=settings.log_level, format=settings.log_format)

        return cls(storage=create_storage(settings), settings=settings)

    async def initialize(self) -> None:
        """Initialize the service (storage collections, etc.)."""
        await self.storage.initialize()

    async def close(self) -> None:
        """Wait for admitted deliveries to be logged, then release resources."""
        await self.dispatcher.wait_idle()
        await self.transport.close()
        await self.storage.close()

    async def __aenter__(self) -> WebhookService:
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    # Registration

    async def create_webhook(
        self,
        user_id: str,
        data: EndpointData | Mapping[str, Any],
    ) -> WebhookEndpoint:
        """Register a webhook for a user.

        Raises:
            ValidationError: If the registration data is invalid.
        """
        return await self.registry.register(user_id, _coerce(EndpointData, data, "webhook data"))

    async def get_webhook(self, webhook_id: str) -> WebhookEndpoint:
        """Fetch a webhook. Raises NotFoundError if missing."""
        return await self.registry.lookup(webhook_id)

    async def get_user_webhooks(self, user_id: str) -> list[WebhookEndpoint]:
        """A user's webhooks, newest first."""
        return await self.registry.list_by_owner(user_id)

    async def activate_webhook(self, webhook_id: str) -> WebhookEndpoint:
        return await self.registry.activate(webhook_id)

    async def deactivate_webhook(self, webhook_id: str) -> WebhookEndpoint:
        return await self.registry.deactivate(webhook_id)

    async def update_webhook_url(self, webhook_id: str, url: str) -> WebhookEndpoint:
        return await self.registry.update_url(webhook_id, url)

    # Delivery

    async def send_webhook(
        self,
        webhook_id: str,
        message: WebhookMessage | Mapping[str, Any],
        options: DeliveryOptions | Mapping[str, Any] | None = None,
    ) -> Any:
        """Deliver a message to a webhook.

        See WebhookDispatcher.send() for the error contract.

        Returns:
            The endpoint's response body.
        """
        return await self.dispatcher.send(
            webhook_id,
            _coerce(WebhookMessage, message, "message"),
            _coerce(DeliveryOptions, options, "options"),
        )

    async def get_webhook_stats(self, webhook_id: str) -> DeliveryStats:
        """Success/failure counts for a webhook."""
        return await self.delivery_log.stats_for(webhook_id)

    async def get_delivery_logs(self, webhook_id: str) -> list[DeliveryAttempt]:
        """Logged attempts for a webhook, newest first."""
        return await self.delivery_log.attempts_for(webhook_id)

    # Scheduling

    async def schedule_webhook(
        self,
        webhook_id: str,
        schedule: str,
        message: WebhookMessage | Mapping[str, Any],
        options: DeliveryOptions | Mapping[str, Any] | None = None,
    ) -> ScheduledDelivery:
        """Store a message for an external scheduler to deliver later.

        Args:
            webhook_id: Target webhook.
            schedule: Schedule expression understood by the scheduler (e.g. cron).
            message: Message to send on each trigger.
            options: Delivery options for each trigger.

        Returns:
            The stored ScheduledDelivery.

        Raises:
            NotFoundError: If the webhook doesn't exist.
            ValidationError: If the schedule expression is empty.
        """
        webhook = await self.registry.lookup(webhook_id)

        if not schedule or not schedule.strip():
            raise ValidationError(["Schedule is required"], prefix="Invalid schedule")

        scheduled = ScheduledDelivery(
            endpoint_id=webhook.id,
            user_id=webhook.user_id,
            schedule=schedule.strip(),
            message=_coerce(WebhookMessage, message, "message"),
            options=_coerce(DeliveryOptions, options, "options"),
        )
        await self.storage.insert_schedule(scheduled)

        logger.info("Webhook delivery scheduled", schedule_id=scheduled.id, webhook_id=webhook.id)
        return scheduled

    async def list_schedules(self, webhook_id: str) -> list[ScheduledDelivery]:
        """Schedules targeting a webhook, newest first."""
        return await self.storage.list_schedules_by_endpoint(webhook_id)

    async def trigger_scheduled(self, schedule_id: str) -> Any:
        """Run a scheduled delivery now. Called by the external scheduler.

        last_triggered_at is stamped whenever the delivery was admitted,
        whatever the send then raised. Refusals before admission leave it
        unchanged.

        Returns:
            The endpoint's response body.

        Raises:
            NotFoundError: If the schedule or its webhook doesn't exist.
            InactiveEndpointError, RateLimitExceededError, TransportError:
                As for send_webhook().
        """
        with delivery_context(schedule_id=schedule_id):
            scheduled = await self.storage.get_schedule(schedule_id)
            if scheduled is None:
                raise NotFoundError("scheduled_delivery", schedule_id)

            try:
                body = await self.dispatcher.send(
                    scheduled.endpoint_id, scheduled.message, scheduled.options
                )
            except (NotFoundError, PreAdmissionError):
                raise
            except Exception:
                await self.storage.update_schedule(scheduled.mark_triggered())
                raise

            await self.storage.update_schedule(scheduled.mark_triggered())
            logger.info("Scheduled delivery triggered", webhook_id=scheduled.endpoint_id)
            return body


__all__ = ["WebhookService"]
