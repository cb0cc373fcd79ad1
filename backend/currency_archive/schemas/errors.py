# backend/currency_archive/schemas/errors.py
"""
Pydantic schemas for error responses.

These schemas provide a consistent error format across all API endpoints.
Used by the global exception handlers in main.py.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """
    Standard error response format.

    Every domain exception is rendered with this shape, whatever its
    status code.
    """

    error: str = Field(
        ...,
        description="Error type/code (e.g., 'RateNotFoundError')"
    )
    message: str = Field(
        ...,
        description="Human-readable error message"
    )
    details: dict | None = Field(
        default=None,
        description="Additional error context (e.g., the missing date and currency)"
    )


class ValidationErrorDetail(BaseModel):
    """
    Request validation error format (422 responses).

    Used when FastAPI rejects a query parameter before the handler runs
    (unparseable date, non-numeric amount, ...).
    """

    error: str = Field(default="ValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict] = Field(
        ...,
        description="List of validation errors"
    )
