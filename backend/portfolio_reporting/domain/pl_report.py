# backend/portfolio_reporting/domain/pl_report.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional, Union

from .statuses import is_pl_excluded_status

BUSINESS_PROPERTY_ID = "business"
BUSINESS_PROPERTY_ADDRESS = "Business (No Property)"

DEFAULT_MONTH_COUNT = 6


@dataclass
class MonthlyPLData:
    month: str  # "YYYY-MM"
    total_income: float = 0.0
    total_expenses: float = 0.0
    net_income: float = 0.0
    income_by_category: dict[str, float] = field(default_factory=dict)
    expenses_by_category: dict[str, float] = field(default_factory=dict)

    def add(self, amount: float, category: str) -> None:
        if amount > 0:
            self.income_by_category[category] = self.income_by_category.get(category, 0.0) + amount
            self.total_income += amount
        elif amount < 0:
            self.expenses_by_category[category] = self.expenses_by_category.get(category, 0.0) + abs(amount)
            self.total_expenses += abs(amount)
        self.net_income = self.total_income - self.total_expenses


@dataclass(frozen=True)
class PLTotals:
    total_income: float = 0.0
    total_expenses: float = 0.0
    net_income: float = 0.0


@dataclass(frozen=True)
class PropertyBreakdown:
    property_id: str
    property_address: str
    total_income: float
    total_expenses: float
    net_income: float
    last_month_income: float
    last_month_expenses: float
    last_month_net_income: float


@dataclass(frozen=True)
class PropertyPLReport:
    property_id: str
    property_address: str
    months: list[MonthlyPLData]
    # named for the usual 6-month window; averages over whatever month_count was asked for
    six_month_average: PLTotals


@dataclass(frozen=True)
class PortfolioPLReport:
    months: list[MonthlyPLData]
    six_month_average: PLTotals
    last_full_month: MonthlyPLData
    property_breakdowns: list[PropertyBreakdown]


# -------------------- Month helpers --------------------

def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def shift_month(d: date, months: int) -> date:
    """First day of the month `months` away from d's month (negative = earlier)."""
    idx = d.year * 12 + (d.month - 1) + months
    return date(idx // 12, idx % 12 + 1, 1)


def trailing_month_keys(month_count: int, as_of: Optional[date] = None) -> list[str]:
    """`month_count` keys ending at as_of's month, oldest first."""
    if month_count < 1:
        raise ValueError("month_count must be >= 1")
    as_of = as_of or date.today()
    return [month_key(shift_month(as_of, -i)) for i in range(month_count - 1, -1, -1)]


def effective_date(txn: Any) -> date:
    return getattr(txn, "override_date", None) or txn.date


def _is_business(property_id: Optional[str]) -> bool:
    return property_id is None or property_id == "" or property_id == BUSINESS_PROPERTY_ID


def _counts_toward_pl(txn: Any) -> bool:
    # Capital outflows (renovations, purchases) stay off the operating P&L; income always counts.
    return not (txn.expense_type == "Capital" and txn.amount < 0)


def _bucket(transactions: Iterable[Any], keys: list[str]) -> list[MonthlyPLData]:
    buckets = {k: MonthlyPLData(month=k) for k in keys}
    for t in transactions:
        b = buckets.get(month_key(effective_date(t)))
        if b is None:
            continue  # outside the window
        b.add(float(t.amount), t.category)
    return [buckets[k] for k in keys]


def _average(months: list[MonthlyPLData], month_count: int) -> PLTotals:
    # divides by the window length, so empty months pull the average down
    income = sum(m.total_income for m in months) / month_count
    expenses = sum(m.total_expenses for m in months) / month_count
    return PLTotals(total_income=income, total_expenses=expenses, net_income=income - expenses)


# -------------------- Reports --------------------

def generate_property_pl_report(
    transactions: Iterable[Any],
    property_id: str,
    property_address: str,
    month_count: int = DEFAULT_MONTH_COUNT,
    *,
    as_of: Optional[date] = None,
) -> PropertyPLReport:
    keys = trailing_month_keys(month_count, as_of)
    filtered = [t for t in transactions if t.property_id == property_id and _counts_toward_pl(t)]
    months = _bucket(filtered, keys)
    return PropertyPLReport(
        property_id=property_id,
        property_address=property_address,
        months=months,
        six_month_average=_average(months, month_count),
    )


def active_pl_property_ids(properties: Iterable[Any]) -> dict[str, str]:
    """id -> address for properties whose ledger belongs on the portfolio P&L."""
    return {
        p.id: p.address
        for p in properties
        if not getattr(p, "archived", False) and not is_pl_excluded_status(getattr(p, "status", None))
    }


def _breakdowns(
    transactions: list[Any],
    addresses: dict[str, str],
    window: set[str],
    last_month: str,
) -> list[PropertyBreakdown]:
    totals: dict[str, list[float]] = {}
    for t in transactions:
        key = month_key(effective_date(t))
        if key not in window and key != last_month:
            continue
        pid = BUSINESS_PROPERTY_ID if _is_business(t.property_id) else t.property_id
        # income, expenses, last-month income, last-month expenses
        acc = totals.setdefault(pid, [0.0, 0.0, 0.0, 0.0])
        amount = float(t.amount)
        in_window = key in window
        if amount > 0:
            if in_window:
                acc[0] += amount
            if key == last_month:
                acc[2] += amount
        elif amount < 0:
            if in_window:
                acc[1] += abs(amount)
            if key == last_month:
                acc[3] += abs(amount)

    out = [
        PropertyBreakdown(
            property_id=pid,
            property_address=BUSINESS_PROPERTY_ADDRESS if pid == BUSINESS_PROPERTY_ID else addresses.get(pid, pid),
            total_income=inc,
            total_expenses=exp,
            net_income=inc - exp,
            last_month_income=lm_inc,
            last_month_expenses=lm_exp,
            last_month_net_income=lm_inc - lm_exp,
        )
        for pid, (inc, exp, lm_inc, lm_exp) in totals.items()
    ]
    out.sort(key=lambda b: b.net_income, reverse=True)
    return out


def generate_portfolio_pl_report(
    transactions: Iterable[Any],
    properties: Iterable[Any],
    month_count: int = DEFAULT_MONTH_COUNT,
    *,
    as_of: Optional[date] = None,
) -> PortfolioPLReport:
    """
    Portfolio-wide P&L across active properties plus business-level entries.

    Ledger rows tagged with an archived property, a pipeline-stage property
    (Soft offer / Hard offer / Opportunity), or an id not in `properties` are
    dropped. Rows with no property id always count.
    """
    as_of = as_of or date.today()
    keys = trailing_month_keys(month_count, as_of)
    addresses = active_pl_property_ids(properties)

    filtered = [
        t
        for t in transactions
        if _counts_toward_pl(t) and (_is_business(t.property_id) or t.property_id in addresses)
    ]

    months = _bucket(filtered, keys)

    last_month = month_key(shift_month(as_of, -1))
    last_full_month = _bucket(filtered, [last_month])[0]

    return PortfolioPLReport(
        months=months,
        six_month_average=_average(months, month_count),
        last_full_month=last_full_month,
        property_breakdowns=_breakdowns(filtered, addresses, set(keys), last_month),
    )


def _categories(report: Union[PropertyPLReport, PortfolioPLReport], attr: str) -> list[str]:
    seen: set[str] = set()
    for m in report.months:
        seen.update(getattr(m, attr).keys())
    return sorted(seen)


def get_income_categories(report: Union[PropertyPLReport, PortfolioPLReport]) -> list[str]:
    return _categories(report, "income_by_category")


def get_expense_categories(report: Union[PropertyPLReport, PortfolioPLReport]) -> list[str]:
    return _categories(report, "expenses_by_category")
