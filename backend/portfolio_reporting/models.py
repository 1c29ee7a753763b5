# backend/portfolio_reporting/models.py
from __future__ import annotations

import uuid
import datetime as dt
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


def _new_id() -> str:
    return str(uuid.uuid4())


# -----------------------------
# Core domain: Properties
# -----------------------------
class Property(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    address: Mapped[str] = mapped_column(String(255), nullable=False)
    # Opportunity|Soft Offer|Hard Offer|Rehab|Operational|Needs Tenant|Selling|Closed
    status: Mapped[str] = mapped_column(String(40), nullable=False, default="Opportunity", index=True)
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    offer_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    rehab_costs: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    arv: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    actual_rent: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    potential_rent: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    current_house_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    current_loan_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    units: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False, default=dt.datetime.utcnow)

    monthly_expenses: Mapped[Optional["MonthlyExpense"]] = relationship(
        back_populates="property", uselist=False, cascade="all, delete-orphan"
    )
    property_units: Mapped[List["PropertyUnit"]] = relationship(
        back_populates="property", cascade="all, delete-orphan", order_by="PropertyUnit.position"
    )
    transactions: Mapped[List["Transaction"]] = relationship(back_populates="property", cascade="all, delete-orphan")


class MonthlyExpense(Base):
    __tablename__ = "property_monthly_expenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    mortgage: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    taxes: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    insurance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    property_management: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    utilities: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    vacancy: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    cap_ex: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    other: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    # entered by the user; not recomputed from the columns above
    total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    property: Mapped["Property"] = relationship(back_populates="monthly_expenses")


class PropertyUnit(Base):
    __tablename__ = "property_units"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    unit_number: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    status: Mapped[str] = mapped_column(String(40), nullable=False, default="Operational")  # Operational|Behind On Rent|Vacant

    property: Mapped["Property"] = relationship(back_populates="property_units")


# -----------------------------
# Ledger
# -----------------------------
class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_property_date", "property_id", "date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)

    # NULL = business-level transaction
    property_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("properties.id", ondelete="CASCADE"), nullable=True, index=True
    )

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    override_date: Mapped[Optional[dt.date]] = mapped_column(Date, nullable=True)
    amount: Mapped[float] = mapped_column(Float, nullable=False)  # + income, - expense
    category: Mapped[str] = mapped_column(String(120), nullable=False)
    expense_type: Mapped[str] = mapped_column(String(20), nullable=False, default="Operating")  # Operating|Capital

    unit: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    payee: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False, default=dt.datetime.utcnow)

    property: Mapped[Optional["Property"]] = relationship(back_populates="transactions")
