# proptrack/routers/portfolio.py
"""
Portfolio metrics endpoints.

- GET /owners/{id}/portfolio/summary - Portfolio totals
- GET /owners/{id}/portfolio/properties - Sorted per-property metrics
- GET /owners/{id}/portfolio/performers - Best / worst property for a metric

All three accept the same filters (period, state, entity_type, status),
so the list and the summary always describe the same property set.
Invalid enumeration values are rejected by the service layer and mapped
to 400 by the global handlers.
"""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from proptrack.config import settings
from proptrack.database import get_db
from proptrack.dependencies import get_owner_or_404, get_portfolio_service
from proptrack.models import User
from proptrack.schemas.portfolio import (
    PerformersResponse,
    PortfolioSummaryResponse,
    PropertyMetricsResponse,
)
from proptrack.services.portfolio import (
    BestWorst,
    PortfolioFilters,
    PortfolioService,
    PortfolioSummary,
    PropertyMetrics,
)
from proptrack.utils.context import set_owner_id

# =============================================================================
# ROUTER SETUP
# =============================================================================

router = APIRouter(
    prefix="/owners",
    tags=["Portfolio"],
)


# =============================================================================
# SHARED QUERY PARAMETERS
# =============================================================================

def portfolio_filters(
        period: str = Query(
            default=settings.default_period,
            description="Reporting period: monthly, quarterly or annual",
        ),
        state: str | None = Query(
            default=None,
            description="Only properties in this state (e.g. NSW)",
        ),
        entity_type: str | None = Query(
            default=None,
            description="Only properties held by this entity (e.g. Personal, Trust)",
        ),
        status: str | None = Query(
            default=None,
            description="Only properties with this status: active or sold",
        ),
) -> PortfolioFilters:
    """Build the shared filter set; raises ValidationError (400) on bad values."""
    return PortfolioFilters.from_raw(
        period=period,
        state=state,
        entity_type=entity_type,
        status=status,
    )


# =============================================================================
# MAPPER FUNCTIONS (Internal Types -> Pydantic Schemas)
# =============================================================================

def _map_summary(summary: PortfolioSummary) -> PortfolioSummaryResponse:
    """Map internal PortfolioSummary to Pydantic schema."""
    return PortfolioSummaryResponse(
        property_count=summary.property_count,
        total_value=summary.total_value,
        total_debt=summary.total_debt,
        total_equity=summary.total_equity,
        portfolio_lvr=summary.portfolio_lvr,
        cash_flow=summary.cash_flow,
        average_yield=summary.average_yield,
        period_start=summary.period_start,
        period_end=summary.period_end,
    )


def _map_metrics(metrics: PropertyMetrics) -> PropertyMetricsResponse:
    """Map internal PropertyMetrics to Pydantic schema."""
    return PropertyMetricsResponse(**asdict(metrics))


def _map_performers(result: BestWorst) -> PerformersResponse:
    return PerformersResponse(
        metric=result.metric,
        best=result.best,
        worst=result.worst,
        considered=result.considered,
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/{owner_id}/portfolio/summary",
    response_model=PortfolioSummaryResponse,
    summary="Get portfolio summary",
    response_description="Ratio-of-sums totals for the filtered properties",
)
def get_portfolio_summary(
        owner: User = Depends(get_owner_or_404),
        filters: PortfolioFilters = Depends(portfolio_filters),
        as_of: date | None = Query(
            default=None,
            description="Reference date for the reporting period (default: today)",
        ),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioSummaryResponse:
    """
    Get portfolio totals for the current reporting period.

    - **portfolioLVR** and **averageYield** are ratios of sums, and are
      `null` when the filtered properties have no valuation
    - An owner with no matching properties gets zero totals, not an error

    Raises **404** if the owner does not exist.
    """
    set_owner_id(owner.id)

    summary = service.get_summary(db=db, owner_id=owner.id, filters=filters, as_of=as_of)
    return _map_summary(summary)


@router.get(
    "/{owner_id}/portfolio/properties",
    response_model=list[PropertyMetricsResponse],
    summary="Get per-property metrics",
    response_description="Sorted metrics for each filtered property",
)
def get_property_metrics(
        owner: User = Depends(get_owner_or_404),
        filters: PortfolioFilters = Depends(portfolio_filters),
        sort_by: str = Query(
            default=settings.default_sort_by,
            description="Sort key: cashFlow, equity, lvr or alphabetical",
        ),
        sort_order: str = Query(
            default=settings.default_sort_order,
            description="Sort direction: asc or desc",
        ),
        as_of: date | None = Query(
            default=None,
            description="Reference date for the reporting period (default: today)",
        ),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> list[PropertyMetricsResponse]:
    """
    Get metrics for every property matching the filters.

    Properties without a valuation report `hasValue: false` with `null`
    LVR and yields. Sorting by `lvr` orders those as LVR 0; equal keys
    keep a stable order.

    Raises **400** for an unknown sort key or direction, **404** if the
    owner does not exist.
    """
    set_owner_id(owner.id)

    metrics = service.get_property_metrics(
        db=db,
        owner_id=owner.id,
        filters=filters,
        sort_by=sort_by,
        sort_order=sort_order,
        as_of=as_of,
    )
    return [_map_metrics(m) for m in metrics]


@router.get(
    "/{owner_id}/portfolio/performers",
    response_model=PerformersResponse,
    summary="Get best and worst performing property",
)
def get_performers(
        owner: User = Depends(get_owner_or_404),
        filters: PortfolioFilters = Depends(portfolio_filters),
        metric: str = Query(
            default="net_yield",
            description=(
                "Metric to rank by: cash_flow, equity, lvr, gross_yield, "
                "net_yield, capital_growth, capital_growth_percent"
            ),
        ),
        as_of: date | None = Query(default=None),
        db: Session = Depends(get_db),
        service: PortfolioService = Depends(get_portfolio_service),
) -> PerformersResponse:
    """
    Get the property ids with the highest and lowest value of one metric.

    Properties where the metric is `null` are not ranked.
    """
    set_owner_id(owner.id)

    result = service.get_performers(
        db=db,
        owner_id=owner.id,
        filters=filters,
        metric=metric,
        as_of=as_of,
    )
    return _map_performers(result)
