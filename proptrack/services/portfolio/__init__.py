# proptrack/services/portfolio/__init__.py
"""
Portfolio Service Package.

This package computes point-in-time portfolio metrics for one owner:
- Portfolio totals (get_summary)
- Sorted per-property metrics (get_property_metrics)
- Best / worst performers for one metric (get_performers)

Usage:
    from proptrack.services.portfolio import PortfolioService, PortfolioFilters

    service = PortfolioService()
    filters = PortfolioFilters.from_raw(period="annual", status="active")

    summary = service.get_summary(db, owner_id=1, filters=filters)
    metrics = service.get_property_metrics(db, owner_id=1, filters=filters)

Architecture:
    portfolio/
    ├── __init__.py       # This file - package exports
    ├── types.py          # Internal data classes
    ├── period.py         # Reporting period -> date window
    ├── resolvers.py      # Latest valuation, debt, transaction windowing
    ├── calculators.py    # Metric formulas and calculators
    ├── sorting.py        # Metrics ordering and best/worst ranking
    ├── stores.py         # SQLAlchemy store implementations
    └── service.py        # PortfolioService (orchestrator)

Data Flow:
    Filters → resolve_period → PeriodWindow
    Properties → PortfolioFilters.matches → property id set
    Id set → LatestValuationResolver / DebtAggregator / TransactionWindower
           → PortfolioInputs
    PortfolioInputs → PropertyMetricsCalculator → PropertyMetrics → sort_metrics
    PortfolioInputs → PortfolioTotalsCalculator → PortfolioSummary
"""

from proptrack.services.portfolio.calculators import (
    PortfolioTotalsCalculator,
    PropertyMetricsCalculator,
)
from proptrack.services.portfolio.period import annualization_multiplier, resolve_period
from proptrack.services.portfolio.resolvers import (
    DebtAggregator,
    LatestValuationResolver,
    TransactionWindower,
)
from proptrack.services.portfolio.service import PortfolioService
from proptrack.services.portfolio.sorting import (
    PERFORMER_METRICS,
    find_best_worst,
    sort_metrics,
)
from proptrack.services.portfolio.stores import (
    SqlLoanStore,
    SqlPropertyStore,
    SqlTransactionStore,
    SqlValuationStore,
)
from proptrack.services.portfolio.types import (
    BestWorst,
    PeriodWindow,
    PortfolioFilters,
    PortfolioInputs,
    PortfolioSummary,
    PropertyMetrics,
)

__all__ = [
    # Service
    "PortfolioService",
    # Types
    "BestWorst",
    "PeriodWindow",
    "PortfolioFilters",
    "PortfolioInputs",
    "PortfolioSummary",
    "PropertyMetrics",
    # Components
    "resolve_period",
    "annualization_multiplier",
    "LatestValuationResolver",
    "DebtAggregator",
    "TransactionWindower",
    "PropertyMetricsCalculator",
    "PortfolioTotalsCalculator",
    "sort_metrics",
    "find_best_worst",
    "PERFORMER_METRICS",
    # Stores
    "SqlPropertyStore",
    "SqlValuationStore",
    "SqlLoanStore",
    "SqlTransactionStore",
]
