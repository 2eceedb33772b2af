# tests/services/portfolio/test_portfolio_service.py
"""
Integration tests for PortfolioService.

These run the full pipeline against an in-memory SQLite database:
properties -> filters -> latest valuations / loans / windowed
transactions -> calculators -> sorting.

The reference date is pinned to 15 June 2024 throughout.
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from proptrack.models import PropertyStatus, TransactionType
from proptrack.services.exceptions import (
    InvalidMetricError,
    InvalidSortKeyError,
    InvalidStatusError,
)
from proptrack.services.portfolio import PortfolioFilters, PortfolioService
from proptrack.services.portfolio.stores import SqlTransactionStore
from tests.conftest import (
    create_loan,
    create_property,
    create_transaction,
    create_user,
    create_valuation,
)

AS_OF = date(2024, 6, 15)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def service() -> PortfolioService:
    return PortfolioService()


@pytest.fixture
def portfolio(db):
    """
    Owner with two properties:
    - A (Sydney, NSW, Personal): valued 600k, 400k split loans,
      June rent +2,400 and expense -300
    - B (Melbourne, VIC, Trust): no valuation, no loans, no transactions
    """
    owner = create_user(db, email="owner@example.com")

    prop_a = create_property(
        db, owner, address="12 Harbour St", suburb="Sydney", state="NSW",
        entity_name="Personal", purchase_price="500000",
    )
    prop_b = create_property(
        db, owner, address="3 Collins St", suburb="Melbourne", state="VIC",
        entity_name="Trust", purchase_price="450000",
    )

    # Newer valuation inserted first
    create_valuation(db, prop_a, "600000", date(2024, 3, 1))
    create_valuation(db, prop_a, "550000", date(2023, 1, 1))

    create_loan(db, prop_a, "250000")
    create_loan(db, prop_a, "150000", lender="Second Bank")

    create_transaction(db, owner, prop_a, "2400", date(2024, 6, 1))
    create_transaction(db, owner, prop_a, "-300", date(2024, 6, 30), TransactionType.EXPENSE)
    # Outside the June window
    create_transaction(db, owner, prop_a, "2400", date(2024, 5, 31))
    create_transaction(db, owner, prop_a, "2400", date(2024, 7, 1))
    # No property: never counted
    create_transaction(db, owner, None, "-120", date(2024, 6, 10), TransactionType.PERSONAL)

    # Another owner's data must never leak in
    other = create_user(db, email="other@example.com")
    other_prop = create_property(db, other, suburb="Perth", state="WA")
    create_valuation(db, other_prop, "900000", date(2024, 1, 1))
    create_loan(db, other_prop, "100000")
    create_transaction(db, other, other_prop, "5000", date(2024, 6, 5))

    return {"owner": owner, "a": prop_a, "b": prop_b}


# =============================================================================
# SUMMARY
# =============================================================================

class TestGetSummary:
    """Tests for PortfolioService.get_summary()."""

    def test_two_property_scenario(self, db, service, portfolio):
        summary = service.get_summary(db, portfolio["owner"].id, as_of=AS_OF)

        assert summary.property_count == 2
        assert summary.total_value == Decimal("600000.00")
        assert summary.total_debt == Decimal("400000.00")
        assert summary.total_equity == Decimal("200000.00")
        assert summary.portfolio_lvr == Decimal("0.6667")
        assert summary.cash_flow == Decimal("2100.00")
        assert summary.average_yield == Decimal("0.0480")
        assert summary.period_start == date(2024, 6, 1)
        assert summary.period_end == date(2024, 6, 30)

    def test_filter_by_state(self, db, service, portfolio):
        filters = PortfolioFilters.from_raw(state="VIC")

        summary = service.get_summary(db, portfolio["owner"].id, filters, as_of=AS_OF)

        assert summary.property_count == 1
        assert summary.total_value == Decimal("0.00")
        assert summary.portfolio_lvr is None
        assert summary.average_yield is None

    def test_filtered_out_set_returns_zero_record(self, db, service, portfolio):
        filters = PortfolioFilters.from_raw(status="sold")

        summary = service.get_summary(db, portfolio["owner"].id, filters, as_of=AS_OF)

        assert summary.property_count == 0
        assert summary.total_value == Decimal("0")
        assert summary.cash_flow == Decimal("0")
        assert summary.portfolio_lvr is None

    def test_owner_without_properties(self, db, service):
        owner = create_user(db, email="empty@example.com")

        summary = service.get_summary(db, owner.id, as_of=AS_OF)

        assert summary.property_count == 0

    def test_quarterly_window_uses_multiplier_four(self, db, service, portfolio):
        """Q2 holds three rent payments and one expense; annualized by 4."""
        filters = PortfolioFilters.from_raw(period="quarterly")

        summary = service.get_summary(db, portfolio["owner"].id, filters, as_of=AS_OF)

        # Q2: 2400 (May 31) + 2400 (Jun 1) - 300 (Jun 30)
        assert summary.cash_flow == Decimal("4500.00")
        # 4800 * 4 / 600000
        assert summary.average_yield == Decimal("0.0320")

    def test_plain_string_period_without_from_raw(self, db, service, portfolio):
        filters = PortfolioFilters(period="quarterly")

        summary = service.get_summary(db, portfolio["owner"].id, filters, as_of=AS_OF)
        metrics = service.get_property_metrics(
            db, portfolio["owner"].id, filters, as_of=AS_OF
        )

        assert summary.period_start == date(2024, 4, 1)
        assert summary.cash_flow == Decimal("4500.00")
        assert len(metrics) == 2

    def test_repeated_calls_identical(self, db, service, portfolio):
        first = service.get_summary(db, portfolio["owner"].id, as_of=AS_OF)
        second = service.get_summary(db, portfolio["owner"].id, as_of=AS_OF)

        assert first == second


# =============================================================================
# PROPERTY METRICS
# =============================================================================

class TestGetPropertyMetrics:
    """Tests for PortfolioService.get_property_metrics()."""

    def test_two_property_scenario(self, db, service, portfolio):
        metrics = service.get_property_metrics(
            db, portfolio["owner"].id, sort_by="alphabetical", as_of=AS_OF
        )

        by_id = {m.property_id: m for m in metrics}
        a = by_id[portfolio["a"].id]
        b = by_id[portfolio["b"].id]

        assert a.current_value == Decimal("600000.00")
        assert a.total_loans == Decimal("400000.00")
        assert a.equity == Decimal("200000.00")
        assert a.lvr == Decimal("0.6667")
        assert a.gross_yield == Decimal("0.0480")
        assert a.net_yield == Decimal("0.0420")
        assert a.cash_flow == Decimal("2100.00")
        assert a.has_value is True

        assert b.equity == Decimal("0")
        assert b.lvr is None
        assert b.gross_yield is None
        assert b.has_value is False
        assert b.cash_flow == Decimal("0")

    def test_alphabetical_order(self, db, service, portfolio):
        metrics = service.get_property_metrics(
            db, portfolio["owner"].id, sort_by="alphabetical", sort_order="asc", as_of=AS_OF
        )

        assert [m.suburb for m in metrics] == ["Melbourne", "Sydney"]

    def test_equity_descending(self, db, service, portfolio):
        metrics = service.get_property_metrics(
            db, portfolio["owner"].id, sort_by="equity", sort_order="desc", as_of=AS_OF
        )

        assert [m.property_id for m in metrics] == [portfolio["a"].id, portfolio["b"].id]

    def test_latest_valuation_wins(self, db, service, portfolio):
        create_valuation(db, portfolio["b"], "500000", date(2023, 1, 1))
        create_valuation(db, portfolio["b"], "650000", date(2024, 6, 1))

        metrics = service.get_property_metrics(
            db, portfolio["owner"].id, PortfolioFilters.from_raw(state="VIC"), as_of=AS_OF
        )

        assert metrics[0].current_value == Decimal("650000.00")
        assert metrics[0].capital_growth == Decimal("200000.00")

    def test_list_and_summary_agree(self, db, service, portfolio):
        """Both operations see exactly the same filtered property set."""
        filters = PortfolioFilters.from_raw(entity_type="Personal")
        owner_id = portfolio["owner"].id

        summary = service.get_summary(db, owner_id, filters, as_of=AS_OF)
        metrics = service.get_property_metrics(db, owner_id, filters, as_of=AS_OF)

        assert summary.property_count == len(metrics) == 1
        assert summary.total_equity == sum(m.equity for m in metrics)
        assert summary.cash_flow == sum(m.cash_flow for m in metrics)

    def test_filters_combine(self, db, service, portfolio):
        filters = PortfolioFilters.from_raw(state="NSW", entity_type="Trust")

        assert service.get_property_metrics(db, portfolio["owner"].id, filters, as_of=AS_OF) == []

    def test_sold_status_filter(self, db, service, portfolio):
        sold = create_property(
            db, portfolio["owner"], suburb="Hobart", state="TAS",
            status=PropertyStatus.SOLD,
        )

        metrics = service.get_property_metrics(
            db, portfolio["owner"].id, PortfolioFilters.from_raw(status="sold"), as_of=AS_OF
        )

        assert [m.property_id for m in metrics] == [sold.id]
        assert metrics[0].status == "sold"

    def test_invalid_sort_key_rejected_before_fetching(self, db, portfolio):
        class ExplodingPropertyStore:
            def find_properties(self, db, owner_id):
                raise AssertionError("store should not be called")

        service = PortfolioService(property_store=ExplodingPropertyStore())

        with pytest.raises(InvalidSortKeyError):
            service.get_property_metrics(db, portfolio["owner"].id, sort_by="price")


# =============================================================================
# PERFORMERS
# =============================================================================

class TestGetPerformers:
    """Tests for PortfolioService.get_performers()."""

    def test_equity_best_and_worst(self, db, service, portfolio):
        result = service.get_performers(
            db, portfolio["owner"].id, metric="equity", as_of=AS_OF
        )

        assert result.best == portfolio["a"].id
        assert result.worst == portfolio["b"].id

    def test_unvalued_property_not_ranked_by_yield(self, db, service, portfolio):
        result = service.get_performers(
            db, portfolio["owner"].id, metric="net_yield", as_of=AS_OF
        )

        assert result.considered == [portfolio["a"].id]

    def test_invalid_metric(self, db, service, portfolio):
        with pytest.raises(InvalidMetricError):
            service.get_performers(db, portfolio["owner"].id, metric="suburb")


# =============================================================================
# FAILURES
# =============================================================================

class TestFailures:
    """Upstream failures and invalid filters."""

    def test_store_failure_propagates_unchanged(self, db, portfolio):
        class BrokenTransactionStore(SqlTransactionStore):
            def find_transactions(self, db, owner_id, start_date, end_date):
                raise OperationalError("SELECT", {}, Exception("connection lost"))

        service = PortfolioService(transaction_store=BrokenTransactionStore())

        with pytest.raises(OperationalError):
            service.get_summary(db, portfolio["owner"].id, as_of=AS_OF)

    def test_invalid_status_filter(self):
        with pytest.raises(InvalidStatusError):
            PortfolioFilters.from_raw(status="archived")
