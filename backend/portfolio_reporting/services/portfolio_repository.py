# backend/portfolio_reporting/services/portfolio_repository.py
from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..models import Property, Transaction
from ..schemas import PropertyRecord, TransactionRecord


class PortfolioSource(Protocol):
    def list_properties(self, *, include_archived: bool = False) -> list[PropertyRecord]: ...

    def list_transactions(self, *, property_id: Optional[str] = None) -> list[TransactionRecord]: ...


class SqlPortfolioRepository:
    """Loads report inputs from the database and hands back detached pydantic records."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_properties(self, *, include_archived: bool = False) -> list[PropertyRecord]:
        q = (
            select(Property)
            .options(selectinload(Property.monthly_expenses), selectinload(Property.property_units))
            .order_by(Property.created_at, Property.id)
        )
        if not include_archived:
            q = q.where(Property.archived.is_(False))
        return [PropertyRecord.model_validate(row) for row in self.db.scalars(q).all()]

    def list_transactions(self, *, property_id: Optional[str] = None) -> list[TransactionRecord]:
        q = select(Transaction).order_by(Transaction.date, Transaction.id)
        if property_id is not None:
            q = q.where(Transaction.property_id == property_id)
        return [TransactionRecord.model_validate(row) for row in self.db.scalars(q).all()]
