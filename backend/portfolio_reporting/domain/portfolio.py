# backend/portfolio_reporting/domain/portfolio.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Generic, Iterable, Optional, TypeVar

from .statuses import UNIT_BEHIND_ON_RENT, UNIT_VACANT, is_operational_property

log = logging.getLogger(__name__)

T = TypeVar("T")


class ReportInputError(ValueError):
    """A property field holds a value the calculators cannot use (NaN, inf, non-numeric)."""


def unwrap_or_zero(value: Any, *, field_name: str = "value") -> float:
    """
    None -> 0.0, finite number -> float.
    NaN / inf / garbage raise ReportInputError instead of quietly becoming 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ReportInputError(f"{field_name} must be numeric, got bool")
    try:
        x = float(value)
    except (TypeError, ValueError):
        raise ReportInputError(f"{field_name} must be numeric, got {value!r}")
    if math.isnan(x) or math.isinf(x):
        raise ReportInputError(f"{field_name} must be finite, got {value!r}")
    return x


# -------------------- Report types --------------------

@dataclass(frozen=True)
class ExpenseBreakdown:
    mortgage: float = 0.0
    taxes: float = 0.0
    insurance: float = 0.0
    property_management: float = 0.0
    utilities: float = 0.0
    vacancy: float = 0.0
    cap_ex: float = 0.0
    other: float = 0.0
    total: float = 0.0

    @classmethod
    def from_record(cls, expenses: Any) -> "ExpenseBreakdown":
        if expenses is None:
            return cls()
        return cls(
            **{
                f.name: unwrap_or_zero(getattr(expenses, f.name, None), field_name=f"monthly_expenses.{f.name}")
                for f in fields(cls)
            }
        )

    @classmethod
    def total_of(cls, items: Iterable["ExpenseBreakdown"]) -> "ExpenseBreakdown":
        items = list(items)
        return cls(**{f.name: sum(getattr(e, f.name) for e in items) for f in fields(cls)})


@dataclass(frozen=True)
class PropertyCashFlowData:
    id: str
    address: str
    status: str

    current_rent_income: float
    current_expenses: ExpenseBreakdown
    current_net_cash_flow: float

    potential_rent_income: float
    potential_expenses: ExpenseBreakdown
    potential_net_cash_flow: float

    is_operational: bool

    operational_units: int = 0
    behind_rent_units: int = 0
    vacant_units: int = 0


@dataclass(frozen=True)
class PropertyAssetData:
    id: str
    address: str
    status: str
    current_value: float
    loan_value: float
    equity: float
    equity_percent: float
    is_operational: bool


@dataclass(frozen=True)
class CashFlowSummary:
    current_total_rent_income: float = 0.0
    current_total_expenses: ExpenseBreakdown = field(default_factory=ExpenseBreakdown)
    current_total_net_cash_flow: float = 0.0

    potential_total_rent_income: float = 0.0
    potential_total_expenses: ExpenseBreakdown = field(default_factory=ExpenseBreakdown)
    potential_total_net_cash_flow: float = 0.0

    properties_count: int = 0
    operational_properties_count: int = 0

    total_operational_units: int = 0
    total_behind_rent_units: int = 0
    total_vacant_units: int = 0


@dataclass(frozen=True)
class AssetSummary:
    total_property_value: float = 0.0
    total_loan_value: float = 0.0
    total_equity: float = 0.0
    average_equity_percent: float = 0.0
    properties_count: int = 0
    operational_properties_count: int = 0


@dataclass(frozen=True)
class PortfolioCashFlowReport:
    properties: list[PropertyCashFlowData]
    summary: CashFlowSummary
    generated_at: datetime


@dataclass(frozen=True)
class PortfolioAssetReport:
    properties: list[PropertyAssetData]
    summary: AssetSummary
    generated_at: datetime


@dataclass(frozen=True)
class ReportError:
    message: str
    property_id: Optional[str] = None
    property_address: Optional[str] = None
    details: Optional[str] = None


@dataclass(frozen=True)
class ReportGenerationResult(Generic[T]):
    data: Optional[T]
    errors: list[ReportError] = field(default_factory=list)
    has_warnings: bool = False


def _now() -> datetime:
    return datetime.now(timezone.utc)


# -------------------- Per-property calculators --------------------

def _unit_tallies(prop: Any) -> tuple[int, int, int]:
    """(operational, behind_on_rent, vacant). Unknown unit statuses count as operational."""
    units = list(getattr(prop, "property_units", None) or [])
    if not units:
        return int(unwrap_or_zero(getattr(prop, "units", None), field_name="units")), 0, 0

    operational = behind = vacant = 0
    for u in units:
        status = getattr(u, "status", None)
        if status == UNIT_BEHIND_ON_RENT:
            behind += 1
        elif status == UNIT_VACANT:
            vacant += 1
        else:
            operational += 1
    return operational, behind, vacant


def calculate_property_cash_flow(prop: Any) -> PropertyCashFlowData:
    """
    Monthly cash flow for one property, current (actual rent) and potential
    (potential rent) scenarios.

    Non-operational properties report all zeros regardless of what is stored on
    the record. Expenses come straight from monthly_expenses and are the same in
    both scenarios; only rent differs.
    """
    if not is_operational_property(prop.status):
        zero = ExpenseBreakdown()
        return PropertyCashFlowData(
            id=prop.id,
            address=prop.address,
            status=prop.status,
            current_rent_income=0.0,
            current_expenses=zero,
            current_net_cash_flow=0.0,
            potential_rent_income=0.0,
            potential_expenses=zero,
            potential_net_cash_flow=0.0,
            is_operational=False,
        )

    current_rent = unwrap_or_zero(prop.actual_rent, field_name="actual_rent")
    potential_rent = unwrap_or_zero(prop.potential_rent, field_name="potential_rent")
    expenses = ExpenseBreakdown.from_record(getattr(prop, "monthly_expenses", None))
    operational, behind, vacant = _unit_tallies(prop)

    return PropertyCashFlowData(
        id=prop.id,
        address=prop.address,
        status=prop.status,
        current_rent_income=current_rent,
        current_expenses=expenses,
        current_net_cash_flow=current_rent - expenses.total,
        potential_rent_income=potential_rent,
        potential_expenses=expenses,
        potential_net_cash_flow=potential_rent - expenses.total,
        is_operational=True,
        operational_units=operational,
        behind_rent_units=behind,
        vacant_units=vacant,
    )


def calculate_property_assets(prop: Any) -> PropertyAssetData:
    """
    Current value falls back to ARV when there is no live valuation. Status does
    not gate the numbers here; is_operational is carried for display only.
    """
    house_value = unwrap_or_zero(prop.current_house_value, field_name="current_house_value")
    current_value = house_value if house_value > 0 else unwrap_or_zero(prop.arv, field_name="arv")

    loan = unwrap_or_zero(prop.current_loan_value, field_name="current_loan_value")
    loan_value = loan if loan > 0 else 0.0

    equity = current_value - loan_value
    equity_percent = (equity / current_value) * 100 if current_value > 0 else 0.0

    return PropertyAssetData(
        id=prop.id,
        address=prop.address,
        status=prop.status,
        current_value=current_value,
        loan_value=loan_value,
        equity=equity,
        equity_percent=equity_percent,
        is_operational=is_operational_property(prop.status),
    )


# -------------------- Portfolio aggregation --------------------

def _isolate(properties: Iterable[Any], calc, *, message: str, report_type: str) -> tuple[list, list[ReportError]]:
    """
    Run `calc` over operational properties. One bad property must not sink the
    report: failures become ReportErrors and the property is left out.
    """
    out: list = []
    errors: list[ReportError] = []
    for prop in properties:
        if not is_operational_property(getattr(prop, "status", None)):
            continue
        try:
            out.append(calc(prop))
        except Exception as e:
            log.warning(
                "%s failed for property",
                report_type,
                extra={"property_id": getattr(prop, "id", None), "report_type": report_type},
                exc_info=True,
            )
            errors.append(
                ReportError(
                    message=message,
                    property_id=getattr(prop, "id", None),
                    property_address=getattr(prop, "address", None),
                    details=str(e) or type(e).__name__,
                )
            )
    return out, errors


def summarize_cash_flow(rows: list[PropertyCashFlowData]) -> CashFlowSummary:
    current_rent = sum(r.current_rent_income for r in rows)
    current_expenses = ExpenseBreakdown.total_of(r.current_expenses for r in rows)
    potential_rent = sum(r.potential_rent_income for r in rows)
    potential_expenses = ExpenseBreakdown.total_of(r.potential_expenses for r in rows)

    # net comes from the summed totals, not a sum of per-property nets (float drift)
    return CashFlowSummary(
        current_total_rent_income=current_rent,
        current_total_expenses=current_expenses,
        current_total_net_cash_flow=current_rent - current_expenses.total,
        potential_total_rent_income=potential_rent,
        potential_total_expenses=potential_expenses,
        potential_total_net_cash_flow=potential_rent - potential_expenses.total,
        properties_count=len(rows),
        operational_properties_count=sum(1 for r in rows if r.is_operational),
        total_operational_units=sum(r.operational_units for r in rows),
        total_behind_rent_units=sum(r.behind_rent_units for r in rows),
        total_vacant_units=sum(r.vacant_units for r in rows),
    )


def summarize_assets(rows: list[PropertyAssetData]) -> AssetSummary:
    total_value = sum(r.current_value for r in rows)
    total_equity = sum(r.equity for r in rows)
    return AssetSummary(
        total_property_value=total_value,
        total_loan_value=sum(r.loan_value for r in rows),
        total_equity=total_equity,
        average_equity_percent=(total_equity / total_value) * 100 if total_value > 0 else 0.0,
        properties_count=len(rows),
        operational_properties_count=sum(1 for r in rows if r.is_operational),
    )


def aggregate_cash_flow_data(properties: Iterable[Any]) -> ReportGenerationResult[PortfolioCashFlowReport]:
    rows, errors = _isolate(
        properties,
        calculate_property_cash_flow,
        message="Failed to calculate cash flow for property",
        report_type="cash_flow",
    )
    report = PortfolioCashFlowReport(properties=rows, summary=summarize_cash_flow(rows), generated_at=_now())
    return ReportGenerationResult(data=report, errors=errors, has_warnings=len(errors) > 0)


def aggregate_asset_data(properties: Iterable[Any]) -> ReportGenerationResult[PortfolioAssetReport]:
    rows, errors = _isolate(
        properties,
        calculate_property_assets,
        message="Failed to calculate assets for property",
        report_type="assets",
    )
    report = PortfolioAssetReport(properties=rows, summary=summarize_assets(rows), generated_at=_now())
    return ReportGenerationResult(data=report, errors=errors, has_warnings=len(errors) > 0)
