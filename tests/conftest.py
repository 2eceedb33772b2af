# tests/conftest.py
"""
Shared fixtures: an isolated in-memory database per test and factories
for owners, properties, valuations, loans and bank transactions.
"""

import os

# Settings are read at import time; configure the test environment first
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import date
from decimal import Decimal
from typing import Iterator, TypeVar

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from proptrack.models import (
    Base,
    Loan,
    Property,
    PropertyStatus,
    PropertyValuation,
    Transaction,
    TransactionType,
    User,
)

T = TypeVar("T")


@pytest.fixture(scope="function")
def db_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Iterator[Session]:
    session = sessionmaker(bind=db_engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def _persist(db: Session, entity: T) -> T:
    db.add(entity)
    db.commit()
    db.refresh(entity)
    return entity


# =============================================================================
# FACTORIES
# =============================================================================

def create_user(db: Session, email: str = "owner@example.com") -> User:
    return _persist(db, User(email=email))


def create_property(
        db: Session,
        user: User,
        address: str = "1 Test St",
        suburb: str = "Sydney",
        state: str = "NSW",
        entity_name: str = "Personal",
        purchase_price: Decimal | str = "500000",
        purchase_date: date = date(2020, 1, 15),
        status: PropertyStatus = PropertyStatus.ACTIVE,
) -> Property:
    return _persist(db, Property(
        user_id=user.id,
        address=address,
        suburb=suburb,
        state=state,
        entity_name=entity_name,
        purchase_price=Decimal(purchase_price),
        purchase_date=purchase_date,
        status=status,
    ))


def create_valuation(
        db: Session,
        prop: Property,
        estimated_value: Decimal | str,
        value_date: date,
        source: str | None = "manual",
) -> PropertyValuation:
    """Valuation owned by the property's owner."""
    return _persist(db, PropertyValuation(
        property_id=prop.id,
        user_id=prop.user_id,
        estimated_value=Decimal(estimated_value),
        value_date=value_date,
        source=source,
    ))


def create_loan(
        db: Session,
        prop: Property,
        current_balance: Decimal | str,
        lender: str = "Test Bank",
) -> Loan:
    return _persist(db, Loan(
        property_id=prop.id,
        user_id=prop.user_id,
        lender=lender,
        current_balance=Decimal(current_balance),
    ))


def create_transaction(
        db: Session,
        user: User,
        prop: Property | None,
        amount: Decimal | str,
        txn_date: date,
        transaction_type: TransactionType = TransactionType.INCOME,
        description: str = "",
) -> Transaction:
    """Bank transaction; ``prop=None`` leaves it unallocated."""
    return _persist(db, Transaction(
        user_id=user.id,
        property_id=None if prop is None else prop.id,
        date=txn_date,
        description=description,
        amount=Decimal(amount),
        transaction_type=transaction_type,
    ))


@pytest.fixture
def sample_user(db: Session) -> User:
    return create_user(db)
