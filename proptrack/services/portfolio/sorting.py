# proptrack/services/portfolio/sorting.py
"""
Ordering and ranking of per-property metric records.

sort_metrics orders a metrics list for display; find_best_worst picks
the best and worst property for a single metric. Neither mutates its
input.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Callable, Sequence
from decimal import Decimal

from proptrack.models import MetricsSortBy, SortOrder
from proptrack.services.constants import ZERO
from proptrack.services.exceptions import (
    InvalidMetricError,
    InvalidSortKeyError,
    InvalidSortOrderError,
)
from proptrack.services.portfolio.types import BestWorst, PropertyMetrics, coerce_choice

# Metrics that can be ranked by find_best_worst (PropertyMetrics attribute names)
PERFORMER_METRICS: tuple[str, ...] = (
    "cash_flow",
    "equity",
    "lvr",
    "gross_yield",
    "net_yield",
    "capital_growth",
    "capital_growth_percent",
)


def _collation_key(text: str) -> tuple[str, str]:
    # Accent- and case-insensitive first, then the raw text to break ties
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text


_SORT_KEYS: dict[MetricsSortBy, Callable[[PropertyMetrics], object]] = {
    MetricsSortBy.CASH_FLOW: lambda m: m.cash_flow,
    MetricsSortBy.EQUITY: lambda m: m.equity,
    # Properties without a valuation order as LVR 0
    MetricsSortBy.LVR: lambda m: m.lvr if m.lvr is not None else ZERO,
    MetricsSortBy.ALPHABETICAL: lambda m: _collation_key(m.suburb),
}


def sort_metrics(
        metrics: Sequence[PropertyMetrics],
        sort_by: MetricsSortBy | str = MetricsSortBy.ALPHABETICAL,
        sort_order: SortOrder | str = SortOrder.ASC,
) -> list[PropertyMetrics]:
    """
    Return metrics ordered by one key in the given direction.

    The sort is stable in both directions: records with equal keys keep
    their input order.

    Args:
        metrics: Records to order
        sort_by: cashFlow, equity, lvr or alphabetical (by suburb)
        sort_order: asc or desc

    Raises:
        InvalidSortKeyError: If sort_by is not a known key
        InvalidSortOrderError: If sort_order is not asc/desc
    """
    key = coerce_choice(MetricsSortBy, sort_by, InvalidSortKeyError)
    order = coerce_choice(SortOrder, sort_order, InvalidSortOrderError)

    return sorted(metrics, key=_SORT_KEYS[key], reverse=order == SortOrder.DESC)


def find_best_worst(metrics: Sequence[PropertyMetrics], key: str) -> BestWorst:
    """
    Find the property with the highest and lowest value of one metric.

    Records where the metric is None (e.g. lvr without a valuation) are
    skipped. On ties the earliest record is best and the latest is worst.

    Raises:
        InvalidMetricError: If key is not in PERFORMER_METRICS

    Example:
        >>> find_best_worst(metrics, "net_yield")
        BestWorst(metric='net_yield', best=3, worst=7, considered=[3, 5, 7])
    """
    if key not in PERFORMER_METRICS:
        raise InvalidMetricError(key, PERFORMER_METRICS)

    best: tuple[int, Decimal] | None = None
    worst: tuple[int, Decimal] | None = None
    considered: list[int] = []

    for record in metrics:
        value = getattr(record, key)
        if value is None:
            continue
        considered.append(record.property_id)
        if best is None or value > best[1]:
            best = (record.property_id, value)
        if worst is None or value <= worst[1]:
            worst = (record.property_id, value)

    return BestWorst(
        metric=key,
        best=best[0] if best else None,
        worst=worst[0] if worst else None,
        considered=considered,
    )
