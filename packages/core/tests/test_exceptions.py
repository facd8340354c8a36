"""Tests for the exception hierarchy."""

import pytest

from household_core.exceptions import (
    ConfigurationError,
    HouseholdError,
    NotificationError,
    RateLimitError,
    StatementNotFoundError,
    StorageError,
    ValidationError,
)


class TestHouseholdError:
    """Tests for the base exception."""

    def test_message_and_defaults(self):
        """Should carry its message, empty details and be non-recoverable."""
        error = HouseholdError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.details == {}
        assert error.recoverable is False

    def test_repr(self):
        """repr should include every attribute."""
        error = HouseholdError("Boom", details={"code": 500})
        assert repr(error) == "HouseholdError(message='Boom', details={'code': 500}, recoverable=False)"

    @pytest.mark.parametrize(
        "error_class",
        [ValidationError, StorageError, StatementNotFoundError, NotificationError,
         RateLimitError, ConfigurationError],
    )
    def test_all_errors_share_base(self, error_class):
        """Every engine error can be caught as HouseholdError."""
        with pytest.raises(HouseholdError):
            raise error_class("failed")


class TestValidationError:
    """Tests for ValidationError."""

    def test_context_goes_into_details(self):
        """Field, value and constraint are copied into details."""
        error = ValidationError(
            "Invalid email address", field="email", value="nope", constraint="name@domain.tld"
        )
        assert error.recoverable is True
        assert error.details == {
            "field": "email",
            "value": "nope",
            "constraint": "name@domain.tld",
        }


class TestStorageErrors:
    """Tests for storage errors."""

    def test_storage_error_is_recoverable(self):
        """Most storage failures are transient."""
        error = StorageError("Database unavailable", operation="create")
        assert error.recoverable is True
        assert error.details["operation"] == "create"

    def test_not_found_is_not_recoverable(self):
        """Retrying a missing statement will not help."""
        error = StatementNotFoundError("Statement abc not found", statement_id="abc")
        assert isinstance(error, StorageError)
        assert error.recoverable is False
        assert error.details["statement_id"] == "abc"


class TestDeliveryErrors:
    """Tests for notification and rate limit errors."""

    def test_notification_error(self):
        """The recipient is recorded."""
        error = NotificationError("Send failed", recipient="a@b.co")
        assert error.details == {"recipient": "a@b.co"}

    def test_rate_limit_error(self):
        """retry_after is recorded even when zero."""
        error = RateLimitError("Too many requests", identifier="a@b.co", retry_after=0.0)
        assert error.recoverable is True
        assert error.details == {"identifier": "a@b.co", "retry_after": 0.0}

    def test_configuration_error(self):
        """Configuration errors are fatal by default."""
        error = ConfigurationError("Bad format", config_key="FORMAT", expected="html", actual="pdf")
        assert error.recoverable is False
        assert error.details == {"config_key": "FORMAT", "expected": "html", "actual": "pdf"}
