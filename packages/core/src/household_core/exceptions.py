"""Custom exceptions for the household statement engine.

This module provides a hierarchy of exception classes for consistent error
handling around statement calculation, storage and report delivery. All
exceptions inherit from HouseholdError, making it easy to catch all
application-specific errors.

The calculation engine itself never raises for malformed numbers; these
errors belong to the services that persist and deliver statements.

Example:
    try:
        record = service.get_statement(statement_id, user_id)
    except StatementNotFoundError:
        return not_found()
    except StorageError as e:
        if e.recoverable:
            # Ask the user to try again
            return retry_later()
        raise
"""

from typing import Any, Optional


class HouseholdError(Exception):
    """Base exception for all household engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise HouseholdError("Something went wrong", details={"code": 500})
        HouseholdError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize HouseholdError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                retry or user correction. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(HouseholdError):
    """Error raised when caller-supplied data fails validation.

    Raised for malformed identifiers, pagination arguments or email
    addresses. Numeric form fields are never rejected; they are coerced.

    Example:
        >>> raise ValidationError(
        ...     "Invalid email address",
        ...     field="email",
        ...     value="not-an-email",
        ...     constraint="Must look like name@domain.tld",
        ... )
        ValidationError: Invalid email address
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error description.
            field: The name of the field that failed validation.
            value: The invalid value (avoid including sensitive data).
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class StorageError(HouseholdError):
    """Error raised when the statement store cannot complete an operation.

    Callers surface these as a generic "please try again" message.

    Attributes:
        operation: The storage operation that failed (create, update, ...).
        statement_id: The statement involved, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        statement_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize StorageError.

        Args:
            message: Human-readable error description.
            operation: The storage operation being attempted.
            statement_id: Identifier of the statement involved.
            details: Optional dictionary with additional context.
            recoverable: Whether the operation can be retried. Defaults to True
                since most storage failures are transient.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.operation = operation
        self.statement_id = statement_id

        if operation:
            self.details["operation"] = operation
        if statement_id:
            self.details["statement_id"] = statement_id


class StatementNotFoundError(StorageError):
    """Error raised when a statement does not exist for the requesting user."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        statement_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message,
            operation=operation,
            statement_id=statement_id,
            details=details,
            recoverable=False,
        )


class NotificationError(HouseholdError):
    """Error raised when a rendered report cannot be delivered.

    Attributes:
        recipient: The email address the report was addressed to.
    """

    def __init__(
        self,
        message: str,
        *,
        recipient: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.recipient = recipient

        if recipient:
            self.details["recipient"] = recipient


class RateLimitError(HouseholdError):
    """Error raised when a caller exceeds the report delivery rate limit.

    Attributes:
        identifier: The rate-limited key (usually the recipient address).
        retry_after: Seconds until another token becomes available.
    """

    def __init__(
        self,
        message: str,
        *,
        identifier: Optional[str] = None,
        retry_after: Optional[float] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=True)
        self.identifier = identifier
        self.retry_after = retry_after

        if identifier:
            self.details["identifier"] = identifier
        if retry_after is not None:
            self.details["retry_after"] = retry_after


class ConfigurationError(HouseholdError):
    """Error raised when configuration is invalid or missing.

    Configuration errors are typically fatal and require administrator
    intervention.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Unsupported report format",
        ...     config_key="HOUSEHOLD_REPORT_DEFAULT_FORMAT",
        ...     expected="text, markdown or html",
        ... )
        ConfigurationError: Unsupported report format
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "HouseholdError",
    "ValidationError",
    "StorageError",
    "StatementNotFoundError",
    "NotificationError",
    "RateLimitError",
    "ConfigurationError",
]
