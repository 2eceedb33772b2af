# proptrack/services/portfolio/service.py
"""
Portfolio Service - orchestrator for portfolio metrics.

Single entry point for the three portfolio read operations:
- get_summary(): Ratio-of-sums totals for the filtered property set
- get_property_metrics(): Sorted per-property metrics for the same set
- get_performers(): Best and worst property for one metric

Every operation runs the same pipeline:
    filters -> period window -> filtered property ids (computed once)
            -> valuations + loans + windowed transactions
            -> calculators

Design Principles:
- Dependency Injection: stores injected via constructor
- No HTTP Knowledge: raises domain exceptions, not HTTPException
- No caching: every call re-fetches and recomputes
- All-or-nothing: a failing store propagates unchanged, no partial results

Usage:
    from proptrack.services.portfolio import PortfolioService, PortfolioFilters

    service = PortfolioService()
    filters = PortfolioFilters.from_raw(period="quarterly", state="NSW")

    summary = service.get_summary(db, owner_id=1, filters=filters)
    metrics = service.get_property_metrics(
        db, owner_id=1, filters=filters, sort_by="equity", sort_order="desc"
    )
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from proptrack.models import MetricsSortBy, SortOrder
from proptrack.services.portfolio.calculators import (
    PortfolioTotalsCalculator,
    PropertyMetricsCalculator,
)
from proptrack.services.portfolio.period import resolve_period
from proptrack.services.portfolio.resolvers import (
    DebtAggregator,
    LatestValuationResolver,
    TransactionWindower,
)
from proptrack.services.portfolio.sorting import find_best_worst, sort_metrics
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
from proptrack.services.protocols import (
    LoanStore,
    PropertyRow,
    PropertyStore,
    TransactionStore,
    ValuationStore,
)

logger = logging.getLogger(__name__)


class PortfolioService:
    """
    Main service for portfolio metric operations.

    Composes the period resolver, the three fetch-side resolvers and the
    calculators. Holds no per-call state, so one instance can serve
    concurrent requests.
    """

    def __init__(
            self,
            property_store: PropertyStore | None = None,
            valuation_store: ValuationStore | None = None,
            loan_store: LoanStore | None = None,
            transaction_store: TransactionStore | None = None,
    ) -> None:
        """
        Initialize the portfolio service.

        Args:
            property_store: Source of an owner's properties (default: SQL)
            valuation_store: Source of valuation rows (default: SQL)
            loan_store: Source of loan rows (default: SQL)
            transaction_store: Source of transactions (default: SQL)
        """
        self._property_store: PropertyStore = property_store or SqlPropertyStore()

        self._valuations = LatestValuationResolver(valuation_store or SqlValuationStore())
        self._debts = DebtAggregator(loan_store or SqlLoanStore())
        self._windower = TransactionWindower(transaction_store or SqlTransactionStore())

        self._metrics_calc = PropertyMetricsCalculator()
        self._totals_calc = PortfolioTotalsCalculator()

        logger.info("PortfolioService initialized")

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def get_summary(
            self,
            db: Session,
            owner_id: int,
            filters: PortfolioFilters | None = None,
            as_of: date | None = None,
    ) -> PortfolioSummary:
        """
        Calculate portfolio totals for the filtered property set.

        Args:
            db: Database session
            owner_id: Portfolio owner (already authorized by the caller)
            filters: Period and property filters (default: monthly, no filters)
            as_of: Reference date for the period window (default: today)

        Returns:
            PortfolioSummary; an empty set gives zero totals and None ratios
        """
        filters = filters or PortfolioFilters()
        window = resolve_period(filters.period, as_of)

        logger.info(
            f"Calculating portfolio summary for owner {owner_id} "
            f"({window.period.value} {window.start_date}..{window.end_date})"
        )

        properties = self._filter_properties(db, owner_id, filters)
        if not properties:
            return PortfolioSummary.empty(window)

        property_ids = [prop.id for prop in properties]
        inputs = self._gather(db, owner_id, property_ids, window)

        return self._totals_calc.calculate(property_ids, inputs, window)

    def get_property_metrics(
            self,
            db: Session,
            owner_id: int,
            filters: PortfolioFilters | None = None,
            sort_by: MetricsSortBy | str = MetricsSortBy.ALPHABETICAL,
            sort_order: SortOrder | str = SortOrder.ASC,
            as_of: date | None = None,
    ) -> list[PropertyMetrics]:
        """
        Calculate sorted per-property metrics for the filtered property set.

        Args:
            db: Database session
            owner_id: Portfolio owner (already authorized by the caller)
            filters: Period and property filters (default: monthly, no filters)
            sort_by: cashFlow, equity, lvr or alphabetical
            sort_order: asc or desc
            as_of: Reference date for the period window (default: today)

        Returns:
            List of PropertyMetrics (empty when nothing matches the filters)

        Raises:
            InvalidSortKeyError: If sort_by is unknown
            InvalidSortOrderError: If sort_order is not asc/desc
        """
        # Validate before any I/O
        sort_metrics([], sort_by, sort_order)

        filters = filters or PortfolioFilters()
        window = resolve_period(filters.period, as_of)

        logger.info(
            f"Calculating property metrics for owner {owner_id} "
            f"({window.period.value}, sort {sort_by} {sort_order})"
        )

        metrics = self._calculate_metrics(db, owner_id, filters, window)
        return sort_metrics(metrics, sort_by, sort_order)

    def get_performers(
            self,
            db: Session,
            owner_id: int,
            filters: PortfolioFilters | None = None,
            metric: str = "net_yield",
            as_of: date | None = None,
    ) -> BestWorst:
        """
        Find the best and worst performing property for one metric.

        Raises:
            InvalidMetricError: If metric is not a rankable metric
        """
        find_best_worst([], metric)

        filters = filters or PortfolioFilters()
        window = resolve_period(filters.period, as_of)

        logger.info(f"Ranking properties by {metric} for owner {owner_id}")

        metrics = self._calculate_metrics(db, owner_id, filters, window)
        return find_best_worst(metrics, metric)

    # =========================================================================
    # PIPELINE
    # =========================================================================

    def _calculate_metrics(
            self,
            db: Session,
            owner_id: int,
            filters: PortfolioFilters,
            window: PeriodWindow,
    ) -> list[PropertyMetrics]:
        properties = self._filter_properties(db, owner_id, filters)
        if not properties:
            return []

        inputs = self._gather(db, owner_id, [prop.id for prop in properties], window)

        return [
            self._metrics_calc.calculate(
                prop=prop,
                value=inputs.value_for(prop.id),
                debt=inputs.debt_for(prop.id),
                transactions=inputs.transactions_for(prop.id),
                multiplier=window.multiplier,
            )
            for prop in properties
        ]

    def _filter_properties(
            self,
            db: Session,
            owner_id: int,
            filters: PortfolioFilters,
    ) -> list[PropertyRow]:
        """Owner properties passing the filters, in store order."""
        properties = self._property_store.find_properties(db, owner_id)
        kept = [prop for prop in properties if filters.matches(prop)]

        logger.debug(f"Filters kept {len(kept)}/{len(properties)} properties for owner {owner_id}")
        return kept

    def _gather(
            self,
            db: Session,
            owner_id: int,
            property_ids: list[int],
            window: PeriodWindow,
    ) -> PortfolioInputs:
        """
        Fetch valuations, loans and windowed transactions for one id set.

        The three fetches are independent and all see the same property
        id set. They run one after another because they share the caller's
        Session, which must not be used from several threads at once.
        """
        ids = frozenset(property_ids)

        values = self._valuations.resolve(db, owner_id, ids)
        debts = self._debts.resolve(db, owner_id, ids)
        transactions = self._windower.resolve(db, owner_id, ids, window)

        missing = ids - values.keys()
        if missing:
            logger.debug(f"No valuation for properties {sorted(missing)}")

        return PortfolioInputs(values=values, debts=debts, transactions=transactions)
