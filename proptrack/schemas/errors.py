# proptrack/schemas/errors.py
"""
Pydantic schemas for error responses.

Every error leaving the API uses one of these two shapes; the global
exception handlers in main.py build them.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """
    Standard error response format.

    Example:
        {"error": "InvalidPeriodError",
         "message": "Invalid period: 'weekly'. Valid options: monthly, quarterly, annual",
         "details": {"field": "period", "valid_options": [...]}}
    """

    error: str = Field(
        ...,
        description="Exception class name (e.g., 'OwnerNotFoundError')"
    )
    message: str = Field(
        ...,
        description="Human-readable error message"
    )
    details: dict | None = Field(
        default=None,
        description="Structured context such as the offending field (optional)"
    )


class ValidationErrorDetail(BaseModel):
    """Request parsing failures (422), one entry per invalid parameter."""

    error: str = Field(default="RequestValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict] = Field(
        ...,
        description="List of {field, message, type} entries"
    )
