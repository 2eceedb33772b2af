# proptrack/schemas/portfolio.py
"""
Pydantic schemas for portfolio metrics.

These schemas handle:
- Portfolio summary (ratio-of-sums totals)
- Per-property metrics
- Best / worst performers

Responses are serialized with camelCase keys (propertyCount,
portfolioLVR, capitalGrowthPercent, ...); fields can still be populated
by their Python names.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# SUMMARY
# =============================================================================

class PortfolioSummaryResponse(_CamelModel):
    """Portfolio totals for one owner, filter set and reporting period."""

    property_count: int = Field(
        ...,
        description="Number of properties after filtering"
    )
    total_value: Decimal = Field(
        ...,
        description="Sum of latest valuations"
    )
    total_debt: Decimal = Field(
        ...,
        description="Sum of loan balances"
    )
    total_equity: Decimal = Field(
        ...,
        description="Total value minus total debt (may be negative)"
    )
    portfolio_lvr: Decimal | None = Field(
        ...,
        alias="portfolioLVR",
        description="Total debt / total value (None if total value is 0)"
    )
    cash_flow: Decimal = Field(
        ...,
        description="Sum of all transaction amounts in the period"
    )
    average_yield: Decimal | None = Field(
        ...,
        description="Annualized income / total value (None if total value is 0)"
    )
    period_start: dt.date | None = Field(
        default=None,
        description="First day of the reporting period"
    )
    period_end: dt.date | None = Field(
        default=None,
        description="Last day of the reporting period"
    )


# =============================================================================
# PROPERTY METRICS
# =============================================================================

class PropertyMetricsResponse(_CamelModel):
    """Metrics for a single property."""

    property_id: int
    address: str
    suburb: str
    state: str
    entity_name: str
    status: str

    purchase_price: Decimal
    current_value: Decimal = Field(
        ...,
        description="Latest valuation (0 when the property has none)"
    )
    capital_growth: Decimal
    capital_growth_percent: Decimal = Field(
        ...,
        description="Growth as % of purchase price (0 if purchase price is 0)"
    )

    total_loans: Decimal
    equity: Decimal
    lvr: Decimal | None = Field(
        ...,
        description="Loan-to-value ratio (None without a valuation)"
    )
    gross_yield: Decimal | None
    net_yield: Decimal | None

    cash_flow: Decimal
    annual_income: Decimal
    annual_expenses: Decimal
    has_value: bool = Field(
        ...,
        description="False when equity/LVR reflect a missing valuation"
    )


# =============================================================================
# PERFORMERS
# =============================================================================

class PerformersResponse(_CamelModel):
    """Best and worst property for one metric."""

    metric: str
    best: int | None = Field(
        ...,
        description="Property id with the highest value (None if none qualify)"
    )
    worst: int | None = Field(
        ...,
        description="Property id with the lowest value (None if none qualify)"
    )
    considered: list[int] = Field(
        default_factory=list,
        description="Property ids that had a value for the metric"
    )
