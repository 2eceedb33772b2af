# proptrack/schemas/__init__.py
"""
Pydantic schemas for API responses.

- errors: Error response formats
- portfolio: Portfolio summary, property metrics and performers

Usage:
    from proptrack.schemas import PortfolioSummaryResponse, PropertyMetricsResponse
    from proptrack.schemas import ErrorDetail
"""

from proptrack.schemas.errors import ErrorDetail, ValidationErrorDetail
from proptrack.schemas.portfolio import (
    PerformersResponse,
    PortfolioSummaryResponse,
    PropertyMetricsResponse,
)

__all__ = [
    # Errors
    "ErrorDetail",
    "ValidationErrorDetail",
    # Portfolio
    "PortfolioSummaryResponse",
    "PropertyMetricsResponse",
    "PerformersResponse",
]
