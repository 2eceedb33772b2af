# proptrack/services/protocols.py
"""
Protocol interfaces for the portfolio engine's data collaborators.

Using typing.Protocol enables structural subtyping:
- The SQLAlchemy stores satisfy these protocols without inheritance
- Test doubles (in-memory lists, failing stores) work the same way

Every store is already scoped to one owner; the engine never enforces
access control itself.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from proptrack.models import PropertyStatus, TransactionType


# =============================================================================
# ROW SHAPES (structural - ORM objects and plain dataclasses both qualify)
# =============================================================================

class PropertyRow(Protocol):
    id: int
    address: str
    suburb: str
    state: str
    entity_name: str
    purchase_price: Decimal
    purchase_date: date
    status: PropertyStatus


class ValuationRow(Protocol):
    id: int
    property_id: int
    estimated_value: Decimal
    value_date: date


class LoanRow(Protocol):
    property_id: int
    current_balance: Decimal


class TransactionRow(Protocol):
    property_id: int | None
    date: date
    amount: Decimal
    transaction_type: TransactionType


# =============================================================================
# STORES
# =============================================================================

class PropertyStore(Protocol):
    def find_properties(self, db: Session, owner_id: int) -> list[PropertyRow]:
        ...


class ValuationStore(Protocol):
    def find_valuations(
        self,
        db: Session,
        owner_id: int,
        property_ids: set[int],
    ) -> list[ValuationRow]:
        ...


class LoanStore(Protocol):
    def find_loans(
        self,
        db: Session,
        owner_id: int,
        property_ids: set[int],
    ) -> list[LoanRow]:
        ...


class TransactionStore(Protocol):
    def find_transactions(
        self,
        db: Session,
        owner_id: int,
        start_date: date,
        end_date: date,
    ) -> list[TransactionRow]:
        ...
