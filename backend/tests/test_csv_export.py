# backend/tests/test_csv_export.py
from __future__ import annotations

import pytest

from portfolio_reporting.domain.csv_export import export_asset_csv, export_cash_flow_csv, export_to_csv
from portfolio_reporting.domain.portfolio import aggregate_asset_data, aggregate_cash_flow_data
from portfolio_reporting.schemas import MonthlyExpenses, PropertyRecord


def _props() -> list[PropertyRecord]:
    return [
        PropertyRecord(
            id="a",
            address="1418 Oakman Blvd",
            status="Operational",
            actual_rent=1350,
            potential_rent=1450,
            current_house_value=120_000,
            current_loan_value=78_000,
            monthly_expenses=MonthlyExpenses(mortgage=540, taxes=160, property_management=135, total=930),
        ),
        PropertyRecord(
            id="b",
            address="12 Main St, Unit 4",
            status="Needs Tenant",
            potential_rent=900.5,
            arv=80_000,
            monthly_expenses=MonthlyExpenses(taxes=100, total=150),
        ),
    ]


def test_cash_flow_csv_current_scenario():
    report = aggregate_cash_flow_data(_props()).data
    lines = export_cash_flow_csv(report, "current").split("\n")

    assert lines[0] == (
        "Address,Status,Current Monthly Rent,Mortgage Payment,Property Tax,"
        "Property Management,Total Expenses,Current Net Cash Flow"
    )
    assert lines[1] == "1418 Oakman Blvd,Operational,1350.00,540.00,160.00,135.00,930.00,420.00"
    # comma in the address gets quoted
    assert lines[2] == '"12 Main St, Unit 4",Needs Tenant,0.00,0.00,100.00,0.00,150.00,-150.00'
    assert lines[3] == "TOTAL,,1350.00,540.00,260.00,135.00,1080.00,270.00"
    assert len(lines) == 4


def test_cash_flow_csv_potential_scenario():
    report = aggregate_cash_flow_data(_props()).data
    lines = export_cash_flow_csv(report, "potential").split("\n")

    assert lines[0].split(",")[2] == "Potential Monthly Rent"
    assert lines[0].split(",")[-1] == "Potential Net Cash Flow"
    assert lines[-1] == "TOTAL,,2350.50,540.00,260.00,135.00,1080.00,1270.50"


def test_cash_flow_csv_rejects_unknown_scenario():
    report = aggregate_cash_flow_data(_props()).data
    with pytest.raises(ValueError):
        export_cash_flow_csv(report, "optimistic")


def test_asset_csv():
    report = aggregate_asset_data(_props()).data
    lines = export_asset_csv(report).split("\n")

    assert lines[0] == "Address,Status,Current Value,Loan Value,Equity,Equity Percentage"
    assert lines[1] == "1418 Oakman Blvd,Operational,120000.00,78000.00,42000.00,35.00"
    assert lines[2] == '"12 Main St, Unit 4",Needs Tenant,80000.00,0.00,80000.00,100.00'
    assert lines[3] == "TOTAL,,200000.00,78000.00,122000.00,61.00"


def test_empty_report_still_has_header_and_total():
    lines = export_asset_csv(aggregate_asset_data([]).data).split("\n")
    assert len(lines) == 2
    assert lines[1] == "TOTAL,,0.00,0.00,0.00,0.00"


def test_dispatch_and_nothing_to_export():
    cf = aggregate_cash_flow_data(_props()).data
    assets = aggregate_asset_data(_props()).data

    assert export_to_csv("cashflow", cf) == export_cash_flow_csv(cf, "current")
    assert export_to_csv("cashflow", cf, "potential") == export_cash_flow_csv(cf, "potential")
    assert export_to_csv("assets", assets) == export_asset_csv(assets)
    assert export_to_csv("cashflow", None) == ""
    assert export_to_csv("pl", cf) == ""
