# backend/currency_archive/services/exceptions.py
"""
Service layer exceptions.

These exceptions represent domain-specific errors and contain NO HTTP knowledge.
The application layer (main.py) maps them to HTTP responses.

Exception Hierarchy:
    ServiceError (base)
    ├── ValidationError
    │   ├── InvalidRangeError
    │   └── InvalidAmountError
    ├── NotFoundError
    │   └── RateNotFoundError
    ├── ArchiveNotReadyError
    └── AnalyticsError
        ├── InsufficientDataError
        └── AnalyticsTimeoutError

Arithmetic edge cases (zero prices, short series, zero variance) never
raise; the calculators degrade to 0, None or NaN instead.
"""

from datetime import date


class ServiceError(Exception):
    """
    Base exception for all service layer errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(ServiceError):
    """
    Raised when programmatic input validation fails.

    Attributes:
        field: The field that failed validation (optional)
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidRangeError(ValidationError):
    """
    Raised for malformed date ranges or rolling window parameters.

    Examples: end before start, window size below 1, window longer than
    the range.
    """


class InvalidAmountError(ValidationError):
    """Raised when a conversion amount is negative."""

    def __init__(self, amount) -> None:
        self.amount = amount
        super().__init__(f"Amount must be non-negative, got {amount}", field="amount")


# =============================================================================
# NOT FOUND ERRORS
# =============================================================================


class NotFoundError(ServiceError):
    """
    Base exception for resource not found errors.

    Attributes:
        resource_type: Type of resource (e.g., "Rate")
        resource_id: Identifier of the resource
    """

    def __init__(
            self,
            message: str,
            resource_type: str | None = None,
            resource_id: str | None = None,
    ) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class RateNotFoundError(NotFoundError):
    """
    Raised when the archive has no rates for a date, or no rate for a
    currency on that date.

    Attributes:
        rate_date: The requested date
        currency: The missing currency, or None when the whole date is absent
    """

    def __init__(self, rate_date: date, currency: str | None = None) -> None:
        self.rate_date = rate_date
        self.currency = currency
        if currency is None:
            message = f"No exchange rates available for {rate_date.isoformat()}"
            resource_id = rate_date.isoformat()
        else:
            message = f"Exchange rate for {currency} not found on {rate_date.isoformat()}"
            resource_id = f"{currency}@{rate_date.isoformat()}"
        super().__init__(message, resource_type="Rate", resource_id=resource_id)


# =============================================================================
# ARCHIVE STATE
# =============================================================================


class ArchiveNotReadyError(ServiceError):
    """Raised when a request arrives before the archive holds any data."""

    def __init__(self, message: str = "Rate archive is not loaded") -> None:
        super().__init__(message)


# =============================================================================
# ANALYTICS ERRORS
# =============================================================================


class AnalyticsError(ServiceError):
    """Base exception for analytics calculation errors."""


class InsufficientDataError(AnalyticsError):
    """
    Raised when a caller explicitly requires a minimum amount of data
    and the archive cannot provide it.

    Attributes:
        found: Number of usable data points
        required: Number of data points required
    """

    def __init__(self, found: int, required: int, what: str = "dates with data") -> None:
        self.found = found
        self.required = required
        super().__init__(
            f"Insufficient data: found {found} {what}, at least {required} required"
        )


class AnalyticsTimeoutError(AnalyticsError):
    """
    Raised when an analytics stage does not finish within the configured
    timeout. Pending work is cancelled before raising.
    """

    def __init__(self, stage: str, timeout_seconds: float) -> None:
        self.stage = stage
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Analytics stage '{stage}' exceeded {timeout_seconds:g}s timeout"
        )


__all__ = [
    "ServiceError",
    "ValidationError",
    "InvalidRangeError",
    "InvalidAmountError",
    "NotFoundError",
    "RateNotFoundError",
    "ArchiveNotReadyError",
    "AnalyticsError",
    "InsufficientDataError",
    "AnalyticsTimeoutError",
]
