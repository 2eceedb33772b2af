# proptrack/services/portfolio/calculators.py
"""
Property and portfolio metric calculators.

Module-level functions hold the individual formulas; the two calculator
classes assemble them:
- PropertyMetricsCalculator: one property's full PropertyMetrics record
- PortfolioTotalsCalculator: ratio-of-sums totals across the filtered set

Design Principles:
- Stateless (no instance state, pure functions)
- Uses Decimal for ALL financial calculations
- No division ever happens on a zero or negative denominator; the result
  is None (lvr, yields) or zero (capital growth percent) instead
- Rounding is applied once, to reported figures only

Usage:
    calc = PropertyMetricsCalculator()
    metrics = calc.calculate(
        prop=prop,
        value=Decimal("600000"),
        debt=Decimal("400000"),
        transactions=[...],
        multiplier=12,
    )
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from proptrack.models import TransactionType
from proptrack.services.constants import (
    HUNDRED,
    MONEY_QUANTUM,
    PERCENT_QUANTUM,
    RATIO_QUANTUM,
    ZERO,
)
from proptrack.services.portfolio.types import (
    PortfolioInputs,
    PortfolioSummary,
    PeriodWindow,
    PropertyMetrics,
)
from proptrack.services.protocols import PropertyRow, TransactionRow

logger = logging.getLogger(__name__)


def _money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM)


def _ratio(value: Decimal | None) -> Decimal | None:
    return value.quantize(RATIO_QUANTUM) if value is not None else None


# =============================================================================
# FORMULAS
# =============================================================================

def calculate_equity(value: Decimal, debt: Decimal) -> Decimal:
    """value - debt, never floored (negative equity is meaningful)."""
    return value - debt


def calculate_lvr(debt: Decimal, value: Decimal) -> Decimal | None:
    """debt / value, or None when there is no positive valuation."""
    if value <= ZERO:
        return None
    return debt / value


def calculate_cash_flow(transactions: Iterable[TransactionRow]) -> Decimal:
    """Sum of every transaction amount; the sign already encodes direction."""
    return sum((txn.amount for txn in transactions), ZERO)


def calculate_income(transactions: Iterable[TransactionRow]) -> Decimal:
    return sum(
        (txn.amount for txn in transactions if txn.transaction_type == TransactionType.INCOME),
        ZERO,
    )


def calculate_expenses(transactions: Iterable[TransactionRow]) -> Decimal:
    """Sum of absolute expense amounts (a positive figure)."""
    return sum(
        (abs(txn.amount) for txn in transactions
         if txn.transaction_type == TransactionType.EXPENSE),
        ZERO,
    )


def calculate_gross_yield(annual_income: Decimal, value: Decimal) -> Decimal | None:
    if value <= ZERO:
        return None
    return annual_income / value


def calculate_net_yield(
        annual_income: Decimal,
        annual_expenses: Decimal,
        value: Decimal,
) -> Decimal | None:
    if value <= ZERO:
        return None
    return (annual_income - annual_expenses) / value


def calculate_capital_growth(value: Decimal, purchase_price: Decimal) -> tuple[Decimal, Decimal]:
    """
    Growth since purchase, absolute and as a percent of purchase price.

    The percent is 0 (not None) when purchase price is not positive.

    Returns:
        (capital_growth, capital_growth_percent)
    """
    growth = value - purchase_price
    if purchase_price <= ZERO:
        return growth, ZERO
    return growth, growth / purchase_price * HUNDRED


# =============================================================================
# PROPERTY METRICS CALCULATOR
# =============================================================================

class PropertyMetricsCalculator:
    """
    Derives the complete metric record for a single property.

    Inputs are already resolved: value is 0 when the property has no
    valuation, debt is 0 when it has no loans, and transactions are only
    those that fell inside the reporting window.
    """

    def calculate(
            self,
            prop: PropertyRow,
            value: Decimal,
            debt: Decimal,
            transactions: list[TransactionRow],
            multiplier: int,
    ) -> PropertyMetrics:
        """
        Calculate metrics for one property.

        Args:
            prop: Property (ORM row or any PropertyRow)
            value: Latest valuation, 0 if none
            debt: Summed loan balances, 0 if none
            transactions: Windowed transactions for this property
            multiplier: Annualization multiplier of the window (12/4/1)

        Returns:
            PropertyMetrics with money rounded to cents and ratios to 4 dp
        """
        purchase_price = Decimal(prop.purchase_price)

        annual_income = calculate_income(transactions) * multiplier
        annual_expenses = calculate_expenses(transactions) * multiplier
        capital_growth, capital_growth_percent = calculate_capital_growth(value, purchase_price)

        status = getattr(prop.status, "value", prop.status)

        return PropertyMetrics(
            property_id=prop.id,
            address=prop.address,
            suburb=prop.suburb,
            state=prop.state,
            entity_name=prop.entity_name,
            status=status,
            purchase_price=_money(purchase_price),
            current_value=_money(value),
            capital_growth=_money(capital_growth),
            capital_growth_percent=capital_growth_percent.quantize(PERCENT_QUANTUM),
            total_loans=_money(debt),
            equity=_money(calculate_equity(value, debt)),
            lvr=_ratio(calculate_lvr(debt, value)),
            gross_yield=_ratio(calculate_gross_yield(annual_income, value)),
            net_yield=_ratio(calculate_net_yield(annual_income, annual_expenses, value)),
            cash_flow=_money(calculate_cash_flow(transactions)),
            annual_income=_money(annual_income),
            annual_expenses=_money(annual_expenses),
            has_value=value > ZERO,
        )


# =============================================================================
# PORTFOLIO TOTALS CALCULATOR
# =============================================================================

class PortfolioTotalsCalculator:
    """
    Aggregates a filtered property set into portfolio totals.

    Value, debt, cash flow and income are summed first; LVR and yield are
    then computed on the sums. The result is never the mean of the
    per-property ratios:

        portfolio_lvr = Σ debt / Σ value
        average_yield = Σ annual_income / Σ value
    """

    def calculate(
            self,
            property_ids: list[int],
            inputs: PortfolioInputs,
            window: PeriodWindow,
    ) -> PortfolioSummary:
        if not property_ids:
            return PortfolioSummary.empty(window)

        total_value = ZERO
        total_debt = ZERO
        cash_flow = ZERO
        income = ZERO

        for property_id in property_ids:
            transactions = inputs.transactions_for(property_id)
            total_value += inputs.value_for(property_id)
            total_debt += inputs.debt_for(property_id)
            cash_flow += calculate_cash_flow(transactions)
            income += calculate_income(transactions)

        annual_income = income * window.multiplier

        return PortfolioSummary(
            property_count=len(property_ids),
            total_value=_money(total_value),
            total_debt=_money(total_debt),
            total_equity=_money(calculate_equity(total_value, total_debt)),
            portfolio_lvr=_ratio(calculate_lvr(total_debt, total_value)),
            cash_flow=_money(cash_flow),
            average_yield=_ratio(calculate_gross_yield(annual_income, total_value)),
            period_start=window.start_date,
            period_end=window.end_date,
        )
