"""Unit tests for Hookline configuration."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from hookline.config import DEFAULT_USER_AGENT, Settings


class TestSettingsDefaults:
    """Tests for default settings."""

    def test_delivery_defaults(self):
        """Deliveries default to a 10s timeout and the stock user agent."""
        settings = Settings(env="test")
        assert settings.delivery_timeout_seconds == 10.0
        assert settings.user_agent == DEFAULT_USER_AGENT

    def test_rate_limit_defaults(self):
        """Default rate limit is 30 deliveries per 60 seconds."""
        settings = Settings(env="test")
        assert settings.rate_limit_max_requests == 30
        assert settings.rate_limit_window_seconds == 60.0

    def test_memory_storage_by_default(self):
        """Storage defaults to the in-memory backend."""
        assert Settings(env="test").storage_backend == "memory"


class TestSettingsValidation:
    """Tests for settings validation."""

    def test_rate_limit_must_be_positive(self):
        """A zero request limit is rejected."""
        with pytest.raises(ValidationError):
            Settings(rate_limit_max_requests=0)

    def test_timeout_must_be_positive(self):
        """A zero timeout is rejected."""
        with pytest.raises(ValidationError):
            Settings(delivery_timeout_seconds=0)

    def test_qdrant_requires_url(self):
        """Selecting qdrant without a URL is rejected."""
        with pytest.raises(ValidationError, match="QDRANT_URL"):
            Settings(storage_backend="qdrant", qdrant_url=None)

    def test_memory_storage_in_production_warns(self):
        """In-memory storage in production should warn."""
        with pytest.warns(UserWarning, match="In-memory storage"):
            Settings(env="production", storage_backend="memory")

    def test_unknown_backend_rejected(self):
        """Only memory and qdrant backends exist."""
        with pytest.raises(ValidationError):
            Settings(storage_backend="postgres")


class TestSettingsEnvironment:
    """Tests for environment variable loading."""

    def test_reads_prefixed_env_vars(self):
        """HOOKLINE_ variables should override defaults."""
        env = {
            "HOOKLINE_RATE_LIMIT_MAX_REQUESTS": "5",
            "HOOKLINE_DELIVERY_TIMEOUT_SECONDS": "2.5",
            "HOOKLINE_USER_AGENT": "Acme-Notifier/2.0",
        }
        with patch.dict(os.environ, env):
            settings = Settings(env="test")
        assert settings.rate_limit_max_requests == 5
        assert settings.delivery_timeout_seconds == 2.5
        assert settings.user_agent == "Acme-Notifier/2.0"
