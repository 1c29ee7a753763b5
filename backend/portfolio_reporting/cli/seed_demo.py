# backend/portfolio_reporting/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from portfolio_reporting.db import SessionLocal, init_db
from portfolio_reporting.domain.pl_report import shift_month
from portfolio_reporting.models import MonthlyExpense, Property, PropertyUnit, Transaction


@dataclass(frozen=True)
class SeedResult:
    properties: int
    transactions: int
    months: int


DEMO_PROPERTIES = [
    {
        "address": "1418 Oakman Blvd",
        "status": "Operational",
        "offer_price": 62_000.0,
        "rehab_costs": 18_000.0,
        "arv": 115_000.0,
        "actual_rent": 1_350.0,
        "potential_rent": 1_450.0,
        "current_house_value": 120_000.0,
        "current_loan_value": 78_000.0,
        "expenses": {"mortgage": 540.0, "taxes": 160.0, "insurance": 95.0, "property_management": 135.0, "total": 930.0},
        "units": ["Operational"],
    },
    {
        "address": "8820 Greenfield Rd",
        "status": "Operational",
        "offer_price": 140_000.0,
        "rehab_costs": 25_000.0,
        "arv": 210_000.0,
        "actual_rent": 2_300.0,
        "potential_rent": 2_900.0,
        "current_house_value": 0.0,
        "current_loan_value": 150_000.0,
        "expenses": {
            "mortgage": 1_010.0,
            "taxes": 290.0,
            "insurance": 160.0,
            "property_management": 230.0,
            "utilities": 120.0,
            "total": 1_810.0,
        },
        "units": ["Operational", "Behind On Rent", "Vacant"],
    },
    {
        "address": "301 Lakeview Ave",
        "status": "Needs Tenant",
        "offer_price": 88_000.0,
        "rehab_costs": 9_000.0,
        "arv": 130_000.0,
        "actual_rent": 0.0,
        "potential_rent": 1_500.0,
        "current_house_value": 128_000.0,
        "current_loan_value": None,
        "expenses": {"taxes": 180.0, "insurance": 110.0, "total": 290.0},
        "units": [],
    },
    {
        "address": "57 Fairview St",
        "status": "Soft Offer",
        "offer_price": 45_000.0,
        "rehab_costs": 30_000.0,
        "arv": 105_000.0,
        "actual_rent": None,
        "potential_rent": 1_200.0,
        "current_house_value": None,
        "current_loan_value": None,
        "expenses": None,
        "units": [],
    },
]


def _add_property(db: Session, spec: dict) -> Property:
    exp = spec.get("expenses")
    row = Property(
        address=spec["address"],
        status=spec["status"],
        offer_price=spec.get("offer_price"),
        rehab_costs=spec.get("rehab_costs"),
        arv=spec.get("arv"),
        actual_rent=spec.get("actual_rent"),
        potential_rent=spec.get("potential_rent"),
        current_house_value=spec.get("current_house_value"),
        current_loan_value=spec.get("current_loan_value"),
        units=len(spec.get("units") or []) or 1,
        monthly_expenses=MonthlyExpense(**exp) if exp else None,
        property_units=[PropertyUnit(position=i, status=s) for i, s in enumerate(spec.get("units") or [])],
    )
    db.add(row)
    return row


def _add_ledger(db: Session, prop: Property, spec: dict, months: int, today: date) -> int:
    n = 0
    exp = spec.get("expenses") or {}
    for i in range(months):
        first = shift_month(today, -i)
        if spec.get("actual_rent"):
            db.add(
                Transaction(
                    property_id=prop.id,
                    date=first.replace(day=3),
                    amount=float(spec["actual_rent"]),
                    category="Rent Income",
                )
            )
            n += 1
        if exp.get("mortgage"):
            db.add(
                Transaction(
                    property_id=prop.id,
                    date=first.replace(day=1),
                    amount=-float(exp["mortgage"]),
                    category="Mortgage",
                )
            )
            n += 1
    return n


def seed_demo(*, months: int = 6, today: Optional[date] = None) -> SeedResult:
    init_db()
    today = today or date.today()
    db = SessionLocal()
    try:
        props = [(_add_property(db, spec), spec) for spec in DEMO_PROPERTIES]
        db.flush()

        txns = sum(_add_ledger(db, prop, spec, months, today) for prop, spec in props)

        # one business-level expense and one capital outflow that the P&L should skip
        last_month = shift_month(today, -1)
        db.add(Transaction(property_id=None, date=last_month.replace(day=15), amount=-49.0, category="Software"))
        db.add(
            Transaction(
                property_id=props[0][0].id,
                date=last_month.replace(day=20),
                amount=-4_800.0,
                category="Roof",
                expense_type="Capital",
            )
        )
        db.commit()
        return SeedResult(properties=len(props), transactions=txns + 2, months=months)
    finally:
        db.close()
