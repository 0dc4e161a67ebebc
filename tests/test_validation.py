"""Tests for webhook registration validation rules."""

from hookline.models import EndpointData
from hookline.validation import (
    MAX_DESCRIPTION_LENGTH,
    MAX_NAME_LENGTH,
    validate_endpoint_data,
    validate_url,
)


class TestValidateUrl:
    """Tests for validate_url."""

    def test_valid_https(self):
        """A normal https URL passes."""
        assert validate_url("https://discord.com/api/webhooks/123/abc") == []

    def test_valid_http_with_port(self):
        """http URLs with ports pass."""
        assert validate_url("http://hooks.example.com:8080/notify") == []

    def test_single_label_host(self):
        """Local receivers such as localhost are valid targets."""
        assert validate_url("http://localhost:8080/hook") == []
        assert validate_url("http://localhost/hook") == []

    def test_missing(self):
        """None and blank URLs are reported as missing only."""
        assert validate_url(None) == ["URL is required"]
        assert validate_url("   ") == ["URL is required"]

    def test_malformed(self):
        """Garbage is not a URL."""
        errors = validate_url("not a url")
        assert "URL must be a valid URL" in errors

    def test_wrong_scheme(self):
        """Only http and https are deliverable."""
        assert "URL must use http or https" in validate_url("ftp://files.example.com/drop")


class TestValidateEndpointData:
    """Tests for validate_endpoint_data."""

    def test_valid(self):
        """Complete, well-formed data is valid."""
        result = validate_endpoint_data(
            EndpointData(url="https://example.com/hook", name="Alerts", description="Ops channel")
        )
        assert result.is_valid is True
        assert result.errors == []

    def test_errors_in_rule_order(self):
        """Every failing rule is reported, URL first, then name, then description."""
        result = validate_endpoint_data(
            EndpointData(
                url=None,
                name="n" * (MAX_NAME_LENGTH + 1),
                description="d" * (MAX_DESCRIPTION_LENGTH + 1),
            )
        )
        assert result.is_valid is False
        assert result.errors == [
            "URL is required",
            f"Name must be {MAX_NAME_LENGTH} characters or fewer",
            f"Description must be {MAX_DESCRIPTION_LENGTH} characters or fewer",
        ]

    def test_name_at_limit_is_valid(self):
        """A name of exactly the maximum length passes."""
        result = validate_endpoint_data(
            EndpointData(url="https://example.com/hook", name="n" * MAX_NAME_LENGTH)
        )
        assert result.is_valid is True
