"""Hookline exception hierarchy.

Provides structured exceptions for error handling throughout the codebase.
All exceptions inherit from HooklineError for easy catching.

Delivery errors fall into two groups:

- PreAdmissionError subclasses (and NotFoundError) mean the delivery was
  never attempted. Nothing is written to the delivery log.
- TransportError subclasses mean the delivery was attempted and failed.
  A failed DeliveryAttempt is always logged before the error reaches the caller.
"""

from __future__ import annotations

from collections.abc import Sequence


class HooklineError(Exception):
    """Base exception for all Hookline errors.

    All custom exceptions in Hookline inherit from this class,
    allowing callers to catch all Hookline-related errors with
    a single except clause.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code for API responses.
    """

    code: str = "hookline_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class ValidationError(HooklineError):
    """Invalid input provided.

    Raised when webhook registration data fails the validation rules.
    Field errors are joined in the order the validator reported them.

    Attributes:
        errors: Individual field error messages.
    """

    code: str = "validation_error"

    def __init__(self, errors: Sequence[str], prefix: str = "Invalid webhook data") -> None:
        self.errors = list(errors)
        super().__init__(f"{prefix}: {', '.join(self.errors)}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "errors": self.errors,
                "message": self.message,
            }
        }


class NotFoundError(HooklineError):
    """Resource not found.

    Raised when a requested resource (webhook, scheduled delivery) doesn't exist.

    Attributes:
        resource_type: Type of resource (e.g., "webhook", "scheduled_delivery").
        resource_id: ID of the missing resource.
    """

    code: str = "not_found"

    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} not found: {resource_id}")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "resource_type": self.resource_type,
                "resource_id": self.resource_id,
                "message": self.message,
            }
        }


class PreAdmissionError(HooklineError):
    """Delivery refused before reaching the network.

    No delivery attempt is logged for these errors.
    """

    code: str = "not_attempted"


class InactiveEndpointError(PreAdmissionError):
    """Webhook endpoint is disabled.

    Attributes:
        endpoint_id: ID of the inactive webhook.
    """

    code: str = "inactive_endpoint"

    def __init__(self, endpoint_id: str) -> None:
        self.endpoint_id = endpoint_id
        super().__init__(f"Webhook is not active: {endpoint_id}")


class RateLimitExceededError(PreAdmissionError):
    """Rate limit exceeded for a webhook endpoint.

    Attributes:
        endpoint_id: ID of the throttled webhook.
        retry_after: Seconds until a delivery slot frees up.
    """

    code: str = "rate_limit_exceeded"

    def __init__(self, endpoint_id: str, retry_after: int) -> None:
        self.endpoint_id = endpoint_id
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded. Retry after {retry_after}s")

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "endpoint_id": self.endpoint_id,
                "retry_after": self.retry_after,
                "message": self.message,
            }
        }


class TransportError(HooklineError):
    """Webhook delivery failed at the HTTP layer.

    Raised for connection failures and non-2xx responses. The failed
    attempt has already been logged when the caller sees this error.

    Attributes:
        status_code: HTTP status code if a response was received.
        response_body: Response body if a response was received.
    """

    code: str = "transport_error"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: object | None = None,
    ) -> None:
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)

    def to_dict(self) -> dict[str, object]:
        """Convert exception to API-friendly dictionary."""
        return {
            "error": {
                "code": self.code,
                "status_code": self.status_code,
                "message": self.message,
            }
        }


class DeliveryTimeoutError(TransportError):
    """Webhook endpoint did not respond within the delivery timeout."""

    code: str = "delivery_timeout"


class StorageError(HooklineError):
    """Storage operation failed.

    Raised when a webhook, attempt or schedule store operation fails.
    """

    code: str = "storage_error"


class ConfigurationError(HooklineError):
    """Configuration error.

    Raised when required configuration is missing or invalid.
    """

    code: str = "configuration_error"
