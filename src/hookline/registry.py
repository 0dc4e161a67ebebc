"""Webhook endpoint registry.

Owns the lifecycle of webhook endpoints: registration (validated),
lookup, listing and activation state. Endpoints are never deleted by the
delivery path.
"""

from __future__ import annotations

from hookline.exceptions import NotFoundError, ValidationError
from hookline.logging import get_logger
from hookline.models import EndpointData, WebhookEndpoint
from hookline.storage import EndpointStore
from hookline.validation import EndpointValidator, validate_endpoint_data

logger = get_logger(__name__)


class WebhookRegistry:
    """Registers and looks up webhook endpoints.

    Example:
        ```python
        registry = WebhookRegistry(storage)
        endpoint = await registry.register("user_1", EndpointData(url="https://example.com/hook"))
        same = await registry.lookup(endpoint.id)
        ```
    """

    def __init__(
        self,
        store: EndpointStore,
        validator: EndpointValidator = validate_endpoint_data,
    ) -> None:
        """Initialize the registry.

        Args:
            store: Endpoint persistence.
            validator: Rule set applied to registration data.
        """
        self._store = store
        self._validator = validator

    async def register(self, owner_id: str, data: EndpointData) -> WebhookEndpoint:
        """Register a new, active webhook endpoint.

        Args:
            owner_id: User who owns the webhook.
            data: Registration input.

        Returns:
            The stored WebhookEndpoint.

        Raises:
            ValidationError: If the data fails validation. The message lists
                every field error in the order the validator reported them.
        """
        result = self._validator(data)
        if not result.is_valid:
            logger.info("Webhook registration rejected", user_id=owner_id, errors=result.errors)
            raise ValidationError(result.errors)

        endpoint = WebhookEndpoint.from_data(owner_id, data)
        await self._store.insert_endpoint(endpoint)

        logger.info("Webhook registered", webhook_id=endpoint.id, user_id=owner_id)
        return endpoint

    async def lookup(self, endpoint_id: str) -> WebhookEndpoint:
        """Fetch a webhook endpoint.

        Raises:
            NotFoundError: If no webhook has this ID.
        """
        endpoint = await self._store.get_endpoint(endpoint_id)
        if endpoint is None:
            raise NotFoundError("webhook", endpoint_id)
        return endpoint

    async def list_by_owner(self, owner_id: str) -> list[WebhookEndpoint]:
        """A user's webhooks, newest created first."""
        return await self._store.list_endpoints_by_owner(owner_id)

    async def _set_active(self, endpoint_id: str, is_active: bool) -> WebhookEndpoint:
        endpoint = await self.lookup(endpoint_id)
        if endpoint.is_active == is_active:
            return endpoint

        endpoint.is_active = is_active
        await self._store.update_endpoint(endpoint.touch())

        logger.info(
            "Webhook activated" if is_active else "Webhook deactivated",
            webhook_id=endpoint_id,
        )
        return endpoint

    async def activate(self, endpoint_id: str) -> WebhookEndpoint:
        """Allow deliveries to a webhook again."""
        return await self._set_active(endpoint_id, True)

    async def deactivate(self, endpoint_id: str) -> WebhookEndpoint:
        """Stop deliveries to a webhook. Its delivery log is kept."""
        return await self._set_active(endpoint_id, False)

    async def update_url(self, endpoint_id: str, url: str) -> WebhookEndpoint:
        """Point a webhook at a new URL.

        Raises:
            NotFoundError: If no webhook has this ID.
            ValidationError: If the URL fails validation.
        """
        endpoint = await self.lookup(endpoint_id)

        result = self._validator(
            EndpointData(url=url, name=endpoint.name, description=endpoint.description)
        )
        if not result.is_valid:
            raise ValidationError(result.errors)

        endpoint.url = url.strip()
        await self._store.update_endpoint(endpoint.touch())

        logger.info("Webhook URL updated", webhook_id=endpoint_id)
        return endpoint


__all__ = ["WebhookRegistry"]
