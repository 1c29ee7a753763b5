# backend/tests/test_property_cash_flow.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pytest

from portfolio_reporting.domain.portfolio import ReportInputError, calculate_property_cash_flow, unwrap_or_zero
from portfolio_reporting.schemas import MonthlyExpenses, PropertyRecord, PropertyUnitRecord


def _prop(**kw) -> PropertyRecord:
    base = dict(id="p1", address="1418 Oakman Blvd", status="Operational")
    base.update(kw)
    return PropertyRecord(**base)


def test_non_operational_property_is_zeroed():
    p = _prop(
        status="Opportunity",
        actual_rent=1800,
        potential_rent=2000,
        monthly_expenses=MonthlyExpenses(mortgage=900, total=2000),
        property_units=[PropertyUnitRecord(status="Vacant")],
    )
    cf = calculate_property_cash_flow(p)

    assert cf.is_operational is False
    assert cf.current_rent_income == 0
    assert cf.current_expenses.total == 0
    assert cf.current_net_cash_flow == 0
    assert cf.potential_rent_income == 0
    assert cf.potential_net_cash_flow == 0
    assert (cf.operational_units, cf.behind_rent_units, cf.vacant_units) == (0, 0, 0)


def test_scenarios_share_expenses_and_differ_only_in_rent():
    exp = MonthlyExpenses(mortgage=540, taxes=160, insurance=95, property_management=135, total=930)
    cf = calculate_property_cash_flow(_prop(actual_rent=1350, potential_rent=1450, monthly_expenses=exp))

    assert cf.is_operational is True
    assert cf.current_expenses == cf.potential_expenses
    assert cf.current_expenses.taxes == 160
    assert cf.current_net_cash_flow == 1350 - 930
    assert cf.potential_net_cash_flow == 1450 - 930


def test_expense_total_is_trusted_not_recomputed():
    exp = MonthlyExpenses(mortgage=500, taxes=100, total=450)
    cf = calculate_property_cash_flow(_prop(actual_rent=1000, monthly_expenses=exp))
    assert cf.current_expenses.total == 450
    assert cf.current_net_cash_flow == 550


def test_missing_rent_and_expenses_default_to_zero():
    cf = calculate_property_cash_flow(_prop(status="Needs Tenant", actual_rent=None, potential_rent=1500))
    assert cf.current_rent_income == 0
    assert cf.potential_rent_income == 1500
    assert cf.current_expenses.total == 0
    assert cf.potential_net_cash_flow == 1500


def test_unit_tallies_default_unknown_statuses_to_operational():
    units = [
        PropertyUnitRecord(status="Operational"),
        PropertyUnitRecord(status="Behind On Rent"),
        PropertyUnitRecord(status="Vacant"),
        PropertyUnitRecord(status="Vacant"),
        PropertyUnitRecord(status="Turnover"),
    ]
    cf = calculate_property_cash_flow(_prop(property_units=units, units=99))
    assert cf.operational_units == 2
    assert cf.behind_rent_units == 1
    assert cf.vacant_units == 2


def test_unit_count_falls_back_to_units_field():
    assert calculate_property_cash_flow(_prop(units=4)).operational_units == 4
    assert calculate_property_cash_flow(_prop(units=None)).operational_units == 0


@dataclass
class P:
    id: str
    address: str
    status: str
    actual_rent: Optional[float] = None
    potential_rent: Optional[float] = None
    monthly_expenses: Optional[object] = None
    units: Optional[int] = None
    property_units: list = field(default_factory=list)


def test_nan_rent_raises_instead_of_becoming_zero():
    with pytest.raises(ReportInputError):
        calculate_property_cash_flow(P(id="x", address="x", status="Operational", actual_rent=float("nan")))


def test_unwrap_or_zero():
    assert unwrap_or_zero(None) == 0.0
    assert unwrap_or_zero(0) == 0.0
    assert unwrap_or_zero("12.5") == 12.5
    with pytest.raises(ReportInputError):
        unwrap_or_zero(float("inf"))
    with pytest.raises(ReportInputError):
        unwrap_or_zero("abc")
