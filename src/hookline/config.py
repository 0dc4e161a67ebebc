"""Configuration management for Hookline."""

import logging
import warnings
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Hookline-Webhook-Manager/1.0"


class Settings(BaseSettings):
    """Hookline configuration loaded from environment variables.

    All settings can be overridden via environment variables with
    the HOOKLINE_ prefix. For example:
        HOOKLINE_STORAGE_BACKEND=qdrant
        HOOKLINE_QDRANT_URL=http://localhost:6333
        HOOKLINE_RATE_LIMIT_MAX_REQUESTS=5
    """

    # Environment
    env: Literal["development", "production", "test"] = Field(
        default="development",
        description="Environment: development, production, or test",
    )

    # Storage
    storage_backend: Literal["memory", "qdrant"] = Field(
        default="memory",
        description="Where webhooks, delivery attempts and schedules are stored",
    )
    qdrant_url: str | None = Field(
        default="http://localhost:6333",
        description="Qdrant connection URL",
    )
    qdrant_api_key: str | None = Field(
        default=None,
        description="Qdrant API key (for cloud)",
    )
    collection_prefix: str = Field(
        default="hookline",
        min_length=1,
        description="Prefix for Qdrant collection names",
    )
    storage_max_scroll_limit: int = Field(
        default=10000,
        ge=100,
        le=100000,
        description=(
            "Page size used when scrolling delivery attempts for stats. "
            "All pages are read; this only bounds a single request."
        ),
    )

    # Delivery
    delivery_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=120.0,
        description="Hard deadline for a single outbound webhook request",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent header sent with every delivery",
    )
    response_body_max_chars: int = Field(
        default=1000,
        ge=0,
        description="Response bodies longer than this are truncated in error details",
    )

    # Rate Limiting
    rate_limit_max_requests: int = Field(
        default=30,
        ge=1,
        description="Max admitted deliveries per endpoint per window",
    )
    rate_limit_window_seconds: float = Field(
        default=60.0,
        gt=0.0,
        description="Length of the rolling rate limit window in seconds",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format",
    )

    model_config = {
        "env_prefix": "HOOKLINE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
    }

    @model_validator(mode="after")
    def validate_storage_settings(self) -> "Settings":
        """Validate that the selected storage backend is usable.

        The Qdrant backend needs a URL. The in-memory backend loses all
        webhooks on restart, which is tolerated outside production only.
        """
        if self.storage_backend == "qdrant" and not self.qdrant_url:
            raise ValueError("HOOKLINE_QDRANT_URL must be set when storage_backend is 'qdrant'")

        if self.env == "production" and self.storage_backend == "memory":
            warnings.warn(
                "In-memory storage is in use in production. "
                "Webhooks and delivery logs are lost on restart.",
                UserWarning,
                stacklevel=2,
            )
            logger.warning("In-memory storage configured in production")

        return self


# Global settings instance
settings = Settings()
