# proptrack/services/portfolio/resolvers.py
"""
Fetch-and-reduce steps feeding the metric calculators.

Each resolver wraps one collaborator store and reduces its rows into a
per-property mapping:
- LatestValuationResolver: many valuation rows -> one value per property
- DebtAggregator: many loan rows -> summed balance per property
- TransactionWindower: owner transactions -> windowed lists per property

Design Principles:
- Stateless apart from the injected store
- One store call per resolve, for the whole property id set
- Store failures propagate unchanged (no retry, no partial results)
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from decimal import Decimal

from sqlalchemy.orm import Session

from proptrack.services.portfolio.types import PeriodWindow
from proptrack.services.protocols import (
    LoanRow,
    LoanStore,
    TransactionRow,
    TransactionStore,
    ValuationRow,
    ValuationStore,
)

logger = logging.getLogger(__name__)


def _as_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


# =============================================================================
# LATEST VALUATION RESOLVER
# =============================================================================

class LatestValuationResolver:
    """
    Selects the single most recent valuation per property.

    Selection is an explicit reduction, never the incidental order of the
    fetched rows:
        1. Group rows by property_id
        2. Keep the row with the greatest value_date
        3. On equal value_date, keep the row with the greatest id
           (the most recently recorded valuation)

    Properties with no valuation rows are absent from the result; callers
    treat absence as "no value".
    """

    def __init__(self, store: ValuationStore) -> None:
        self._store = store

    def resolve(
            self,
            db: Session,
            owner_id: int,
            property_ids: Collection[int],
    ) -> dict[int, Decimal]:
        """
        Fetch and reduce valuations for a set of properties.

        Args:
            db: Database session
            owner_id: Portfolio owner the properties belong to
            property_ids: Properties to resolve (empty -> {} without a query)

        Returns:
            Mapping of property_id -> latest estimated value
        """
        if not property_ids:
            return {}

        ids = set(property_ids)
        rows = self._store.find_valuations(db, owner_id, ids)
        latest = self.reduce_latest(rows, ids)

        logger.debug(
            f"Resolved latest valuations for {len(latest)}/{len(ids)} properties "
            f"from {len(rows)} rows"
        )
        return latest

    @staticmethod
    def reduce_latest(
            rows: Iterable[ValuationRow],
            property_ids: Collection[int] | None = None,
    ) -> dict[int, Decimal]:
        """
        Reduce valuation rows to one value per property (max date, then max id).

        Rows for properties outside property_ids (when given) are ignored.
        """
        winners: dict[int, ValuationRow] = {}

        for row in rows:
            if property_ids is not None and row.property_id not in property_ids:
                continue
            current = winners.get(row.property_id)
            if current is None or (row.value_date, row.id) > (current.value_date, current.id):
                winners[row.property_id] = row

        return {
            property_id: _as_decimal(row.estimated_value)
            for property_id, row in winners.items()
        }


# =============================================================================
# DEBT AGGREGATOR
# =============================================================================

class DebtAggregator:
    """
    Sums current loan balances per property.

    Properties without loans are absent (debt = 0). Negative balances
    (overpaid loans) are summed as-is and never clamped.
    """

    def __init__(self, store: LoanStore) -> None:
        self._store = store

    def resolve(
            self,
            db: Session,
            owner_id: int,
            property_ids: Collection[int],
    ) -> dict[int, Decimal]:
        if not property_ids:
            return {}

        ids = set(property_ids)
        loans = self._store.find_loans(db, owner_id, ids)
        debts = self.sum_by_property(loans, ids)

        logger.debug(f"Aggregated {len(loans)} loans across {len(debts)} properties")
        return debts

    @staticmethod
    def sum_by_property(
            loans: Iterable[LoanRow],
            property_ids: Collection[int] | None = None,
    ) -> dict[int, Decimal]:
        debts: dict[int, Decimal] = {}
        for loan in loans:
            if property_ids is not None and loan.property_id not in property_ids:
                continue
            debts[loan.property_id] = (
                debts.get(loan.property_id, Decimal("0")) + _as_decimal(loan.current_balance)
            )
        return debts


# =============================================================================
# TRANSACTION WINDOWER
# =============================================================================

class TransactionWindower:
    """
    Filters an owner's transactions to a reporting window and property set.

    Keeps transactions with start_date <= date <= end_date whose property_id
    is in the requested set; transactions without a property are out of
    scope. Every requested property appears in the result, with an empty
    list when nothing fell inside the window (a legitimate zero-income,
    zero-expense state, unlike a missing valuation).
    """

    def __init__(self, store: TransactionStore) -> None:
        self._store = store

    def resolve(
            self,
            db: Session,
            owner_id: int,
            property_ids: Collection[int],
            window: PeriodWindow,
    ) -> dict[int, list[TransactionRow]]:
        if not property_ids:
            return {}

        transactions = self._store.find_transactions(
            db, owner_id, window.start_date, window.end_date
        )
        partitioned = self.partition(transactions, property_ids, window)

        logger.debug(
            f"Windowed {sum(len(t) for t in partitioned.values())} of "
            f"{len(transactions)} transactions into "
            f"{window.start_date}..{window.end_date}"
        )
        return partitioned

    @staticmethod
    def partition(
            transactions: Iterable[TransactionRow],
            property_ids: Collection[int],
            window: PeriodWindow,
    ) -> dict[int, list[TransactionRow]]:
        """Group in-window, in-set transactions by property, preserving input order."""
        by_property: dict[int, list[TransactionRow]] = {pid: [] for pid in property_ids}

        for txn in transactions:
            if txn.property_id is None or txn.property_id not in by_property:
                continue
            if not window.contains(txn.date):
                continue
            by_property[txn.property_id].append(txn)

        return by_property
