# proptrack/services/__init__.py
"""
Service layer for business logic.

This package contains the service layer which encapsulates business logic
separate from the API (router) layer. Services:
- Have NO knowledge of HTTP (no HTTPException, no status codes)
- Raise domain-specific exceptions
- Receive database sessions as parameters (not via Depends)
- Are easily testable via dependency injection

Usage:
    from proptrack.services import PortfolioService, PortfolioFilters
    from proptrack.services import ValidationError, OwnerNotFoundError

Architecture:
    services/
    ├── __init__.py          # This file - main exports
    ├── exceptions.py        # Domain exceptions
    ├── constants.py         # Rounding steps and numeric constants
    ├── protocols.py         # Store interfaces (Protocol classes)
    └── portfolio/           # Portfolio metrics engine
        ├── service.py       # Main orchestrator
        ├── types.py         # Internal data types
        ├── period.py        # Period windows
        ├── resolvers.py     # Valuation / debt / transaction resolvers
        ├── calculators.py   # Metric formulas
        ├── sorting.py       # Ordering and ranking
        └── stores.py        # SQLAlchemy stores
"""

from proptrack.services.exceptions import (
    InvalidMetricError,
    InvalidPeriodError,
    InvalidSortKeyError,
    InvalidSortOrderError,
    InvalidStatusError,
    NotFoundError,
    OwnerNotFoundError,
    ServiceError,
    ValidationError,
)
from proptrack.services.portfolio import (
    BestWorst,
    PortfolioFilters,
    PortfolioService,
    PortfolioSummary,
    PropertyMetrics,
)

__all__ = [
    # Services
    "PortfolioService",
    # Types
    "BestWorst",
    "PortfolioFilters",
    "PortfolioSummary",
    "PropertyMetrics",
    # Exceptions
    "ServiceError",
    "ValidationError",
    "InvalidPeriodError",
    "InvalidSortKeyError",
    "InvalidSortOrderError",
    "InvalidStatusError",
    "InvalidMetricError",
    "NotFoundError",
    "OwnerNotFoundError",
]
