"""Custom exceptions for the Udhaar Setu application.

The repayment calculator and the application form engine never raise for
user input: boundary loan terms degrade to a zero summary and field
failures are reported as data. The exceptions below cover the remaining
cases where a caller explicitly asks for a hard failure, such as an
unknown scheme id or a strict submission.

All exceptions inherit from UdhaarError, making it easy to catch all
application-specific errors.

Example:
    try:
        engine.ensure_submittable(values, context)
    except ValidationError as e:
        show_errors(e.details["errors"])
    except UdhaarError as e:
        logger.error("application_failed", error=str(e))
"""

from typing import Any, Optional


class UdhaarError(Exception):
    """Base exception for all Udhaar Setu application errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise UdhaarError("Something went wrong", details={"code": 500})
        UdhaarError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize UdhaarError.

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


class ValidationError(UdhaarError):
    """Error raised when an application or upload fails validation.

    Only raised by the explicit ``ensure_*`` helpers. Regular validation
    calls return error messages instead.

    Attributes:
        field: The field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise ValidationError(
        ...     "Enter a valid IFSC code (e.g., SBIN0123456).",
        ...     field="ifsc_code",
        ...     value="sbin0123456",
        ... )
        ValidationError: Enter a valid IFSC code (e.g., SBIN0123456).
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
            field: The identifier of the field that failed validation.
            value: The invalid value (avoid including account numbers).
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by user correction.
                Defaults to True since validation errors typically require
                user input correction.
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


class SchemeNotFoundError(UdhaarError):
    """Error raised when a scheme id is not in the catalog.

    Attributes:
        scheme_id: The id that could not be resolved.
    """

    def __init__(
        self,
        message: str,
        *,
        scheme_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message, details=details, recoverable=recoverable)
        self.scheme_id = scheme_id

        if scheme_id:
            self.details["scheme_id"] = scheme_id


class SubmissionError(UdhaarError):
    """Error raised when the submission backend rejects an application.

    Submission backends report failures as results. This exception is
    only raised when a caller asks for strict submission.

    Attributes:
        backend: Name of the backend that rejected the application.
    """

    def __init__(
        self,
        message: str,
        *,
        backend: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize SubmissionError.

        Args:
            message: Human-readable error description.
            backend: Identifier of the submission backend.
            details: Optional dictionary with additional context.
            recoverable: Whether resubmission may succeed. Defaults to True
                since backend failures are usually transient.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.backend = backend

        if backend:
            self.details["backend"] = backend


class ConfigurationError(UdhaarError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Minimum term exceeds maximum term",
        ...     config_key="UDHAAR_LOAN_MIN_TERM_MONTHS",
        ...     expected="Value <= max_term_months",
        ... )
        ConfigurationError: Minimum term exceeds maximum term
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
    "UdhaarError",
    "ValidationError",
    "SchemeNotFoundError",
    "SubmissionError",
    "ConfigurationError",
]
