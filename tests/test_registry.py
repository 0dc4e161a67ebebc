"""Tests for the webhook endpoint registry."""

from datetime import UTC, datetime, timedelta

import pytest
from conftest import WEBHOOK_URL

from hookline.exceptions import NotFoundError, ValidationError
from hookline.models import EndpointData, WebhookEndpoint
from hookline.registry import WebhookRegistry
from hookline.storage import MemoryStorage
from hookline.validation import ValidationResult


class TestRegister:
    """Tests for WebhookRegistry.register."""

    async def test_register_stores_active_endpoint(
        self, registry: WebhookRegistry, storage: MemoryStorage
    ):
        """A valid registration is stored active and owned by the caller."""
        endpoint = await registry.register(
            "user_1", EndpointData(url=WEBHOOK_URL, name="Deploys", description="CI notices")
        )

        assert endpoint.id.startswith("whk_")
        assert endpoint.user_id == "user_1"
        assert endpoint.is_active is True
        assert endpoint.created_at == endpoint.updated_at
        assert await storage.get_endpoint(endpoint.id) == endpoint

    async def test_invalid_data_rejected(self, registry: WebhookRegistry, storage: MemoryStorage):
        """Invalid data raises ValidationError and stores nothing."""
        with pytest.raises(ValidationError) as exc_info:
            await registry.register("user_1", EndpointData(url="not a url", name="x" * 81))

        assert exc_info.value.message.startswith("Invalid webhook data: ")
        errors = exc_info.value.errors
        assert errors[0] == "URL must be a valid URL"
        assert errors[-1] == "Name must be 80 characters or fewer"
        assert await storage.list_endpoints_by_owner("user_1") == []

    async def test_missing_url_message(self, registry: WebhookRegistry):
        """A missing URL produces a single readable error."""
        with pytest.raises(ValidationError, match="Invalid webhook data: URL is required"):
            await registry.register("user_1", EndpointData())

    async def test_custom_validator(self, storage: MemoryStorage):
        """The injected validator decides what is valid."""

        def only_example_hosts(data: EndpointData) -> ValidationResult:
            ok = bool(data.url) and "example.com" in data.url
            return ValidationResult(is_valid=ok, errors=[] if ok else ["Host not allowed"])

        registry = WebhookRegistry(storage, validator=only_example_hosts)
        await registry.register("user_1", EndpointData(url=WEBHOOK_URL))
        with pytest.raises(ValidationError, match="Host not allowed"):
            await registry.register("user_1", EndpointData(url="https://other.org/hook"))


class TestLookup:
    """Tests for lookup and listing."""

    async def test_lookup(self, registry: WebhookRegistry, endpoint: WebhookEndpoint):
        """lookup returns the stored endpoint."""
        assert await registry.lookup(endpoint.id) == endpoint

    async def test_lookup_missing(self, registry: WebhookRegistry):
        """Unknown IDs raise NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            await registry.lookup("whk_missing")
        assert exc_info.value.resource_type == "webhook"
        assert exc_info.value.resource_id == "whk_missing"

    async def test_list_by_owner_newest_first(
        self, registry: WebhookRegistry, storage: MemoryStorage
    ):
        """Listings contain only the owner's webhooks, newest first."""
        base = datetime(2026, 1, 1, tzinfo=UTC)
        older = WebhookEndpoint(user_id="user_1", url=WEBHOOK_URL, created_at=base)
        newer = WebhookEndpoint(
            user_id="user_1", url=WEBHOOK_URL, created_at=base + timedelta(minutes=5)
        )
        other = WebhookEndpoint(user_id="user_2", url=WEBHOOK_URL, created_at=base)
        for e in (older, other, newer):
            await storage.insert_endpoint(e)

        listed = await registry.list_by_owner("user_1")
        assert [e.id for e in listed] == [newer.id, older.id]

    async def test_list_unknown_owner(self, registry: WebhookRegistry):
        """An owner with no webhooks gets an empty list."""
        assert await registry.list_by_owner("nobody") == []


class TestActivation:
    """Tests for activate/deactivate."""

    async def test_deactivate_and_activate(
        self, registry: WebhookRegistry, endpoint: WebhookEndpoint
    ):
        """Activation state round-trips through storage."""
        deactivated = await registry.deactivate(endpoint.id)
        assert deactivated.is_active is False
        assert (await registry.lookup(endpoint.id)).is_active is False
        assert deactivated.updated_at >= endpoint.updated_at

        reactivated = await registry.activate(endpoint.id)
        assert reactivated.is_active is True
        assert (await registry.lookup(endpoint.id)).is_active is True

    async def test_activate_already_active_is_noop(
        self, registry: WebhookRegistry, endpoint: WebhookEndpoint
    ):
        """Activating an active webhook leaves it untouched."""
        same = await registry.activate(endpoint.id)
        assert same.updated_at == endpoint.updated_at

    async def test_deactivate_missing(self, registry: WebhookRegistry):
        """Deactivating an unknown webhook raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await registry.deactivate("whk_missing")


class TestUpdateUrl:
    """Tests for update_url."""

    async def test_update_url(self, registry: WebhookRegistry, endpoint: WebhookEndpoint):
        """A valid URL replaces the old one."""
        updated = await registry.update_url(endpoint.id, " https://example.com/hooks/new ")
        assert updated.url == "https://example.com/hooks/new"
        assert (await registry.lookup(endpoint.id)).url == "https://example.com/hooks/new"

    async def test_invalid_url_keeps_old(
        self, registry: WebhookRegistry, endpoint: WebhookEndpoint
    ):
        """An invalid URL is rejected and the stored URL is unchanged."""
        with pytest.raises(ValidationError, match="URL must use http or https"):
            await registry.update_url(endpoint.id, "ftp://files.example.com/drop")
        assert (await registry.lookup(endpoint.id)).url == WEBHOOK_URL

    async def test_missing_webhook(self, registry: WebhookRegistry):
        """Unknown IDs raise NotFoundError before validation."""
        with pytest.raises(NotFoundError):
            await registry.update_url("whk_missing", "not a url")
