# proptrack/services/portfolio/stores.py
"""
SQLAlchemy implementations of the portfolio store protocols.

Every query is scoped to the owner (user_id) passed in; none of them
order their results, since the resolvers never rely on row order.
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from proptrack.models import Loan, Property, PropertyValuation, Transaction


class SqlPropertyStore:
    def find_properties(self, db: Session, owner_id: int) -> list[Property]:
        stmt = select(Property).where(Property.user_id == owner_id).order_by(Property.id)
        return list(db.scalars(stmt).all())


class SqlValuationStore:
    def find_valuations(
            self,
            db: Session,
            owner_id: int,
            property_ids: set[int],
    ) -> list[PropertyValuation]:
        stmt = select(PropertyValuation).where(
            PropertyValuation.user_id == owner_id,
            PropertyValuation.property_id.in_(property_ids),
        )
        return list(db.scalars(stmt).all())


class SqlLoanStore:
    def find_loans(
            self,
            db: Session,
            owner_id: int,
            property_ids: set[int],
    ) -> list[Loan]:
        stmt = select(Loan).where(
            Loan.user_id == owner_id,
            Loan.property_id.in_(property_ids),
        )
        return list(db.scalars(stmt).all())


class SqlTransactionStore:
    def find_transactions(
            self,
            db: Session,
            owner_id: int,
            start_date: date,
            end_date: date,
    ) -> list[Transaction]:
        """Owner transactions dated within [start_date, end_date], both inclusive."""
        stmt = select(Transaction).where(
            Transaction.user_id == owner_id,
            Transaction.date >= start_date,
            Transaction.date <= end_date,
        )
        return list(db.scalars(stmt).all())
