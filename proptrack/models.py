# proptrack/models.py
import datetime as dt
import enum
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, ForeignKey, Enum, Numeric, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# Enums help enforce data integrity at the database level
class PropertyStatus(str, enum.Enum):
    """
    Lifecycle status of a property.

    Transitions are one-way (ACTIVE → SOLD) and owned by the property
    management collaborator, never by the portfolio engine.
    """
    ACTIVE = "active"
    SOLD = "sold"


class TransactionType(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"

    # Summed into cash flow with every other type; excluded from income and expenses
    CAPITAL = "capital"
    TRANSFER = "transfer"
    PERSONAL = "personal"


class ReportingPeriod(str, enum.Enum):
    """Reporting granularity for portfolio metrics."""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class MetricsSortBy(str, enum.Enum):
    CASH_FLOW = "cashFlow"
    EQUITY = "equity"
    LVR = "lvr"
    ALPHABETICAL = "alphabetical"


class SortOrder(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationship: One User owns Many Properties
    properties: Mapped[list["Property"]] = relationship(back_populates="owner")


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    address: Mapped[str] = mapped_column(String)
    suburb: Mapped[str] = mapped_column(String)
    state: Mapped[str] = mapped_column(String, index=True)  # e.g. "NSW", "VIC"
    entity_name: Mapped[str] = mapped_column(String, default="Personal")  # Legal owner
    purchase_price: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    purchase_date: Mapped[date] = mapped_column(Date)
    status: Mapped[PropertyStatus] = mapped_column(Enum(PropertyStatus), default=PropertyStatus.ACTIVE)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    owner: Mapped["User"] = relationship(back_populates="properties")
    valuations: Mapped[list["PropertyValuation"]] = relationship(
        back_populates="property",
        cascade="all, delete-orphan"
    )
    loans: Mapped[list["Loan"]] = relationship(
        back_populates="property",
        cascade="all, delete-orphan"
    )


class PropertyValuation(Base):
    """
    Point-in-time estimate of a property's market value.

    Many rows may exist per property; consumers select the one with the
    latest value_date (highest id on equal dates).
    """
    __tablename__ = "property_valuations"
    __table_args__ = (
        # "Latest valuation per property for owner X"
        Index('ix_valuation_user_property_date', 'user_id', 'property_id', 'value_date'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    estimated_value: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    value_date: Mapped[date] = mapped_column(Date)
    source: Mapped[str | None] = mapped_column(String, nullable=True)  # e.g. "manual", "avm"

    property: Mapped["Property"] = relationship(back_populates="valuations")


class Loan(Base):
    __tablename__ = "loans"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    lender: Mapped[str] = mapped_column(String)
    # Negative balances (overpaid offset/redraw) are stored as-is
    current_balance: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    property: Mapped["Property"] = relationship(back_populates="loans")


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        # "All transactions for owner X between two dates"
        Index('ix_transaction_user_date', 'user_id', 'date'),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    # NULL for personal / unassigned bank transactions
    property_id: Mapped[int | None] = mapped_column(ForeignKey("properties.id"), nullable=True, index=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True)
    description: Mapped[str] = mapped_column(String, default="")
    # Signed: positive = inflow, negative = outflow
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2))
    transaction_type: Mapped[TransactionType] = mapped_column(Enum(TransactionType))
