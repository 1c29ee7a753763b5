from __future__ import annotations

import csv
import io
from typing import Any, Iterable, Optional

from .formatting import format_amount
from .portfolio import PortfolioAssetReport, PortfolioCashFlowReport

SCENARIOS = ("current", "potential")
TOTAL_ROW_LABEL = "TOTAL"


def _to_csv(rows: Iterable[list[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerows(rows)
    # no trailing newline after the TOTAL row
    return buf.getvalue().rstrip("\n")


def export_cash_flow_csv(report: PortfolioCashFlowReport, scenario: str = "current") -> str:
    if scenario not in SCENARIOS:
        raise ValueError(f"scenario must be one of {SCENARIOS}")
    current = scenario == "current"
    label = "Current" if current else "Potential"

    rows: list[list[str]] = [
        [
            "Address",
            "Status",
            f"{label} Monthly Rent",
            "Mortgage Payment",
            "Property Tax",
            "Property Management",
            "Total Expenses",
            f"{label} Net Cash Flow",
        ]
    ]

    for p in report.properties:
        rent = p.current_rent_income if current else p.potential_rent_income
        expenses = p.current_expenses if current else p.potential_expenses
        net = p.current_net_cash_flow if current else p.potential_net_cash_flow
        rows.append(
            [
                p.address,
                p.status,
                format_amount(rent),
                format_amount(expenses.mortgage),
                format_amount(expenses.taxes),
                format_amount(expenses.property_management),
                format_amount(expenses.total),
                format_amount(net),
            ]
        )

    s = report.summary
    rent = s.current_total_rent_income if current else s.potential_total_rent_income
    expenses = s.current_total_expenses if current else s.potential_total_expenses
    net = s.current_total_net_cash_flow if current else s.potential_total_net_cash_flow
    rows.append(
        [
            TOTAL_ROW_LABEL,
            "",
            format_amount(rent),
            format_amount(expenses.mortgage),
            format_amount(expenses.taxes),
            format_amount(expenses.property_management),
            format_amount(expenses.total),
            format_amount(net),
        ]
    )
    return _to_csv(rows)


def export_asset_csv(report: PortfolioAssetReport) -> str:
    rows: list[list[str]] = [["Address", "Status", "Current Value", "Loan Value", "Equity", "Equity Percentage"]]
    for p in report.properties:
        rows.append(
            [
                p.address,
                p.status,
                format_amount(p.current_value),
                format_amount(p.loan_value),
                format_amount(p.equity),
                format_amount(p.equity_percent),
            ]
        )

    s = report.summary
    rows.append(
        [
            TOTAL_ROW_LABEL,
            "",
            format_amount(s.total_property_value),
            format_amount(s.total_loan_value),
            format_amount(s.total_equity),
            format_amount(s.average_equity_percent),
        ]
    )
    return _to_csv(rows)


def export_to_csv(report_type: str, report: Optional[Any], scenario: str = "current") -> str:
    """Dispatch on "cashflow" | "assets". Empty string when there is nothing to export."""
    if report is None:
        return ""
    if report_type == "cashflow":
        return export_cash_flow_csv(report, scenario)
    if report_type == "assets":
        return export_asset_csv(report)
    return ""
