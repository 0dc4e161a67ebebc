"""Validation rules for webhook registration data.

Uses validators library for URL validation. The rule set is a pure
function: it never touches storage or the network, and reports every
failing rule in a stable order so callers can show all problems at once.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import urlparse

import validators

from hookline.models import EndpointData

ALLOWED_SCHEMES = ("http", "https")
MAX_NAME_LENGTH = 80
MAX_DESCRIPTION_LENGTH = 500


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating endpoint data.

    Attributes:
        is_valid: True if no rule failed.
        errors: Failure messages in rule order.
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)


# Signature of the validation collaborator used by WebhookRegistry
EndpointValidator = Callable[[EndpointData], ValidationResult]


def validate_url(url: str | None) -> list[str]:
    """Check a webhook target URL.

    Args:
        url: Candidate URL.

    Returns:
        Error messages, empty if the URL is acceptable.
    """
    if url is None or not url.strip():
        return ["URL is required"]

    url = url.strip()
    errors: list[str] = []

    # simple_host admits single-label hosts such as localhost
    if not validators.url(url, simple_host=True):
        errors.append("URL must be a valid URL")

    scheme = urlparse(url).scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        errors.append("URL must use http or https")

    return errors


def validate_endpoint_data(data: EndpointData) -> ValidationResult:
    """Validate webhook registration data.

    Rules, in reporting order:
    1. URL is present and well-formed, with an http(s) scheme
    2. Name is at most 80 characters
    3. Description is at most 500 characters

    Args:
        data: Registration input.

    Returns:
        ValidationResult with every failing rule listed.
    """
    errors = validate_url(data.url)

    if data.name is not None and len(data.name) > MAX_NAME_LENGTH:
        errors.append(f"Name must be {MAX_NAME_LENGTH} characters or fewer")

    if data.description is not None and len(data.description) > MAX_DESCRIPTION_LENGTH:
        errors.append(f"Description must be {MAX_DESCRIPTION_LENGTH} characters or fewer")

    return ValidationResult(is_valid=not errors, errors=errors)


__all__ = [
    "ALLOWED_SCHEMES",
    "EndpointValidator",
    "MAX_DESCRIPTION_LENGTH",
    "MAX_NAME_LENGTH",
    "ValidationResult",
    "validate_endpoint_data",
    "validate_url",
]
