from __future__ import annotations

import math


def _round_half_up(value: float) -> int:
    # matches Math.round on the reporting front-end: .5 rounds toward +inf
    return int(math.floor(value + 0.5))


def format_currency(value: float) -> str:
    """Whole-dollar USD, e.g. 1234.5 -> "$1,235", -80 -> "-$80"."""
    n = _round_half_up(float(value))
    sign = "-" if n < 0 else ""
    return f"{sign}${abs(n):,}"


def format_percentage(value: float) -> str:
    """`value` is already a percent: 40 -> "40.0%"."""
    return f"{float(value):,.1f}%"


def format_amount(value: float) -> str:
    """Fixed two decimals, no grouping. Used by CSV export."""
    return f"{float(value):.2f}"


def portfolio_headline(cash_flow_report, asset_report) -> dict[str, str]:
    """Display strings for the dashboard header. Missing reports are skipped."""
    out: dict[str, str] = {}
    if cash_flow_report is not None:
        s = cash_flow_report.summary
        out["current_monthly_rent"] = format_currency(s.current_total_rent_income)
        out["current_net_cash_flow"] = format_currency(s.current_total_net_cash_flow)
        out["potential_net_cash_flow"] = format_currency(s.potential_total_net_cash_flow)
    if asset_report is not None:
        s = asset_report.summary
        out["total_property_value"] = format_currency(s.total_property_value)
        out["total_equity"] = format_currency(s.total_equity)
        out["average_equity_percent"] = format_percentage(s.average_equity_percent)
    return out
