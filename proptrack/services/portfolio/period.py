# proptrack/services/portfolio/period.py
"""
Reporting period resolution.

Turns a period granularity into a concrete calendar window anchored to a
reference date. The reference date is always an explicit argument
(defaulting to today) so callers and tests can pin "now".

    monthly   -> first .. last day of the reference month
    quarterly -> first .. last day of the reference calendar quarter
    annual    -> 1 Jan .. 31 Dec of the reference year

The window's annualization multiplier (12 / 4 / 1) travels with it, so the
two can never disagree.
"""

import calendar
from datetime import date

from proptrack.models import ReportingPeriod
from proptrack.services.exceptions import InvalidPeriodError
from proptrack.services.portfolio.types import (
    ANNUALIZATION_MULTIPLIERS,
    PeriodWindow,
    coerce_choice,
)


def _last_day_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def resolve_period(
        period: ReportingPeriod | str,
        today: date | None = None,
) -> PeriodWindow:
    """
    Resolve a reporting period into an inclusive date window.

    Args:
        period: "monthly", "quarterly" or "annual" (or the enum member)
        today: Reference date (default: date.today())

    Returns:
        PeriodWindow with first and last day of the period

    Raises:
        InvalidPeriodError: If period is not a known granularity

    Example:
        >>> resolve_period("quarterly", date(2024, 8, 14))
        PeriodWindow(period=<ReportingPeriod.QUARTERLY: 'quarterly'>,
                     start_date=datetime.date(2024, 7, 1),
                     end_date=datetime.date(2024, 9, 30))
    """
    granularity = coerce_choice(ReportingPeriod, period, InvalidPeriodError)
    if today is None:
        today = date.today()

    if granularity == ReportingPeriod.MONTHLY:
        start = date(today.year, today.month, 1)
        end = _last_day_of_month(today.year, today.month)
    elif granularity == ReportingPeriod.QUARTERLY:
        first_month = 3 * ((today.month - 1) // 3) + 1
        start = date(today.year, first_month, 1)
        end = _last_day_of_month(today.year, first_month + 2)
    else:
        start = date(today.year, 1, 1)
        end = date(today.year, 12, 31)

    return PeriodWindow(period=granularity, start_date=start, end_date=end)


def annualization_multiplier(period: ReportingPeriod | str) -> int:
    """Factor projecting one period's totals to a year (monthly 12, quarterly 4, annual 1)."""
    granularity = coerce_choice(ReportingPeriod, period, InvalidPeriodError)
    return ANNUALIZATION_MULTIPLIERS[granularity]
