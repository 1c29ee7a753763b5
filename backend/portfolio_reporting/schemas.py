# backend/portfolio_reporting/schemas.py
from __future__ import annotations

import datetime as dt
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, field_validator


# -------------------- Properties --------------------

class MonthlyExpenses(BaseModel):
    mortgage: float = 0.0
    taxes: float = 0.0
    insurance: float = 0.0
    property_management: float = 0.0
    utilities: float = 0.0
    vacancy: float = 0.0
    cap_ex: float = 0.0
    other: float = 0.0
    total: float = 0.0

    model_config = ConfigDict(from_attributes=True, frozen=True)


class PropertyUnitRecord(BaseModel):
    status: str = "Operational"
    unit_number: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)


class PropertyRecord(BaseModel):
    """
    Property as seen by the reporting pipeline.

    Numeric fields stay Optional: a missing value is meaningful (defaults to 0
    in the calculators) and is not the same as a non-finite one, which the
    calculators reject.
    """

    id: str
    address: str = ""
    status: str = ""
    archived: bool = False

    offer_price: Optional[float] = None
    rehab_costs: Optional[float] = None
    arv: Optional[float] = None

    actual_rent: Optional[float] = None
    potential_rent: Optional[float] = None
    current_house_value: Optional[float] = None
    current_loan_value: Optional[float] = None

    monthly_expenses: Optional[MonthlyExpenses] = None
    units: Optional[int] = None
    property_units: List[PropertyUnitRecord] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, frozen=True)


# -------------------- Transactions --------------------

class TransactionRecord(BaseModel):
    id: str
    date: dt.date
    amount: float = Field(allow_inf_nan=False)
    category: str = "Uncategorized"
    property_id: Optional[str] = None
    expense_type: str = "Operating"  # Operating|Capital
    override_date: Optional[dt.date] = None

    unit: Optional[str] = None
    payee: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("override_date", mode="before")
    @classmethod
    def _blank_override_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v
