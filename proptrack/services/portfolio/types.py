# proptrack/services/portfolio/types.py
"""
Internal data types for the Portfolio Service.

These dataclasses are used internally by the portfolio calculators.
They are NOT Pydantic schemas - those are defined in
proptrack/schemas/portfolio.py for API serialization.

Design Principles:
- Immutable where possible (frozen=True for value objects)
- Use Decimal for ALL financial values (never float)
- Missing data is None, never a zero stand-in (lvr, yields)
- Recomputed on every call, never cached

Type Hierarchy:
    PeriodWindow        - Inclusive [start_date, end_date] reporting window
    PortfolioFilters    - Validated filter set shared by every operation
    PortfolioInputs     - Fetched values, debts and windowed transactions
    PropertyMetrics     - Complete metrics for one property
    PortfolioSummary    - Ratio-of-sums portfolio totals
    BestWorst           - Best/worst performer ids for one metric
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, TypeVar

from proptrack.models import PropertyStatus, ReportingPeriod
from proptrack.services.exceptions import InvalidPeriodError, InvalidStatusError, ValidationError
from proptrack.services.protocols import PropertyRow, TransactionRow

E = TypeVar("E", bound=enum.Enum)


def coerce_choice(
        enum_cls: type[E],
        value: Any,
        error_cls: type[ValidationError],
) -> E:
    """
    Coerce a raw value into a member of a closed string enumeration.

    Accepts either an enum member or its string value.

    Raises:
        error_cls: If the value is not one of the enumeration's values
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise error_cls(value, [member.value for member in enum_cls]) from None


# =============================================================================
# PERIOD
# =============================================================================

ANNUALIZATION_MULTIPLIERS: dict[ReportingPeriod, int] = {
    ReportingPeriod.MONTHLY: 12,
    ReportingPeriod.QUARTERLY: 4,
    ReportingPeriod.ANNUAL: 1,
}


@dataclass(frozen=True)
class PeriodWindow:
    """
    Reporting window for one call.

    Both ends are inclusive calendar dates: start_date is the first day
    of the period, end_date the last.

    Attributes:
        period: Granularity the window was resolved from
        start_date: First day of the period
        end_date: Last day of the period
    """

    period: ReportingPeriod
    start_date: date
    end_date: date

    @property
    def multiplier(self) -> int:
        """Factor projecting the window's totals to a yearly figure."""
        return ANNUALIZATION_MULTIPLIERS[self.period]

    def contains(self, d: date) -> bool:
        return self.start_date <= d <= self.end_date


# =============================================================================
# FILTERS
# =============================================================================

@dataclass(frozen=True)
class PortfolioFilters:
    """
    Filter set applied identically by every portfolio operation.

    Attributes:
        period: Reporting period granularity
        state: Exact state/region code to keep (e.g. "NSW"), or None
        entity_type: Exact legal-owner entity name to keep, or None
        status: Property status to keep, or None for all
    """

    period: ReportingPeriod = ReportingPeriod.MONTHLY
    state: str | None = None
    entity_type: str | None = None
    status: PropertyStatus | None = None

    @classmethod
    def from_raw(
            cls,
            period: str | ReportingPeriod = ReportingPeriod.MONTHLY,
            state: str | None = None,
            entity_type: str | None = None,
            status: str | PropertyStatus | None = None,
    ) -> PortfolioFilters:
        """
        Build filters from caller-supplied values.

        Raises:
            InvalidPeriodError: If period is not monthly/quarterly/annual
            InvalidStatusError: If status is not active/sold
        """
        return cls(
            period=coerce_choice(ReportingPeriod, period, InvalidPeriodError),
            state=state or None,
            entity_type=entity_type or None,
            status=(
                coerce_choice(PropertyStatus, status, InvalidStatusError)
                if status else None
            ),
        )

    def matches(self, prop: PropertyRow) -> bool:
        """True if the property passes every filter that is set."""
        if self.state is not None and prop.state != self.state:
            return False
        if self.entity_type is not None and prop.entity_name != self.entity_type:
            return False
        if self.status is not None and prop.status != self.status:
            return False
        return True


# =============================================================================
# FETCHED INPUTS
# =============================================================================

@dataclass
class PortfolioInputs:
    """
    Everything fetched for one call, keyed by property id.

    Attributes:
        values: Latest valuation per property (absent = no valuation)
        debts: Summed loan balance per property (absent = no loans)
        transactions: Windowed transactions; every property id present
    """

    values: dict[int, Decimal]
    debts: dict[int, Decimal]
    transactions: dict[int, list[TransactionRow]]

    def value_for(self, property_id: int) -> Decimal:
        return self.values.get(property_id, Decimal("0"))

    def debt_for(self, property_id: int) -> Decimal:
        return self.debts.get(property_id, Decimal("0"))

    def transactions_for(self, property_id: int) -> list[TransactionRow]:
        return self.transactions.get(property_id, [])


# =============================================================================
# OUTPUTS
# =============================================================================

@dataclass
class PropertyMetrics:
    """
    Complete metrics for a single property over one reporting window.

    Attributes:
        property_id .. status: Descriptive fields copied from the property
        purchase_price: Stored purchase price
        current_value: Latest valuation (0 when none exists)
        capital_growth: current_value - purchase_price
        capital_growth_percent: Growth as % of purchase price (0 if price is 0)
        total_loans: Summed loan balances (may be negative)
        equity: current_value - total_loans (may be negative)
        lvr: total_loans / current_value (None without a valuation)
        gross_yield: annual_income / current_value (None without a valuation)
        net_yield: (annual_income - annual_expenses) / current_value (None without a valuation)
        cash_flow: Sum of all windowed transaction amounts
        annual_income: Windowed income × annualization multiplier
        annual_expenses: Windowed expenses × annualization multiplier
        has_value: True if a positive valuation exists

    Note:
        has_value distinguishes "zero equity because no valuation exists"
        from "zero equity because value equals debt".
    """

    property_id: int
    address: str
    suburb: str
    state: str
    entity_name: str
    status: str
    purchase_price: Decimal
    current_value: Decimal
    capital_growth: Decimal
    capital_growth_percent: Decimal
    total_loans: Decimal
    equity: Decimal
    lvr: Decimal | None
    gross_yield: Decimal | None
    net_yield: Decimal | None
    cash_flow: Decimal
    annual_income: Decimal
    annual_expenses: Decimal
    has_value: bool


@dataclass
class PortfolioSummary:
    """
    Portfolio-wide totals for one reporting window.

    Ratios are ratios of sums (sum of debt over sum of value), never the
    mean of per-property ratios.

    Attributes:
        property_count: Number of properties after filtering
        total_value: Sum of latest valuations
        total_debt: Sum of loan balances
        total_equity: total_value - total_debt
        portfolio_lvr: total_debt / total_value (None if total_value <= 0)
        cash_flow: Sum of all windowed transaction amounts
        average_yield: Annualized income / total_value (None if total_value <= 0)
        period_start: First day of the reporting window
        period_end: Last day of the reporting window
    """

    property_count: int
    total_value: Decimal
    total_debt: Decimal
    total_equity: Decimal
    portfolio_lvr: Decimal | None
    cash_flow: Decimal
    average_yield: Decimal | None
    period_start: date | None = None
    period_end: date | None = None

    @classmethod
    def empty(cls, window: PeriodWindow | None = None) -> PortfolioSummary:
        """Well-defined zero record for an empty filtered property set."""
        return cls(
            property_count=0,
            total_value=Decimal("0.00"),
            total_debt=Decimal("0.00"),
            total_equity=Decimal("0.00"),
            portfolio_lvr=None,
            cash_flow=Decimal("0.00"),
            average_yield=None,
            period_start=window.start_date if window else None,
            period_end=window.end_date if window else None,
        )


@dataclass(frozen=True)
class BestWorst:
    """Best and worst property ids for one metric (None when nothing qualifies)."""

    metric: str
    best: int | None
    worst: int | None
    considered: list[int] = field(default_factory=list)
