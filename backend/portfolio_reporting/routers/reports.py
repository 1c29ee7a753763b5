# backend/portfolio_reporting/routers/reports.py
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ..config import settings
from ..db import get_db
from ..domain.formatting import portfolio_headline
from ..domain.pl_report import get_expense_categories, get_income_categories
from ..domain.report_cache import ReportCache
from ..services.portfolio_report_service import PortfolioReportService, PropertyNotFound
from ..services.portfolio_repository import SqlPortfolioRepository

router = APIRouter(prefix="/reports", tags=["reports"])


def get_report_cache(request: Request) -> ReportCache:
    return request.app.state.report_cache


def get_report_service(
    db: Session = Depends(get_db),
    cache: ReportCache = Depends(get_report_cache),
) -> PortfolioReportService:
    return PortfolioReportService(SqlPortfolioRepository(db), cache)


def _payload(obj: Any) -> dict:
    return asdict(obj)


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# -------------------- Cash flow / assets --------------------

@router.get("/cash-flow", response_model=dict)
def cash_flow_report(svc: PortfolioReportService = Depends(get_report_service)):
    return _payload(svc.generate_cash_flow_report())


@router.get("/assets", response_model=dict)
def asset_report(svc: PortfolioReportService = Depends(get_report_service)):
    return _payload(svc.generate_asset_report())


@router.get("/all", response_model=dict)
def all_reports(svc: PortfolioReportService = Depends(get_report_service)):
    results = svc.generate_all_reports()
    out = {k: _payload(v) for k, v in results.items()}
    out["headline"] = portfolio_headline(results["cash_flow"].data, results["assets"].data)
    return out


@router.post("/refresh", response_model=dict)
def refresh_reports(svc: PortfolioReportService = Depends(get_report_service)):
    svc.refresh_reports()
    return {"ok": True}


@router.get("/cash-flow.csv")
def cash_flow_csv(
    scenario: Literal["current", "potential"] = Query(default="current"),
    svc: PortfolioReportService = Depends(get_report_service),
):
    result = svc.generate_cash_flow_report()
    if result.data is None:
        raise HTTPException(status_code=404, detail="no cash flow report data")
    return _csv_response(svc.export_to_csv("cashflow", result.data, scenario), f"cash-flow-{scenario}.csv")


@router.get("/assets.csv")
def assets_csv(svc: PortfolioReportService = Depends(get_report_service)):
    result = svc.generate_asset_report()
    if result.data is None:
        raise HTTPException(status_code=404, detail="no asset report data")
    return _csv_response(svc.export_to_csv("assets", result.data), "assets.csv")


@router.post("/validate", response_model=dict)
def validate_properties(svc: PortfolioReportService = Depends(get_report_service)):
    v = svc.validate_property_data(svc.get_properties_for_reports())
    return {
        "valid_count": len(v.valid),
        "invalid": [{"id": p.id, "address": p.address} for p in v.invalid],
        "warnings": v.warnings,
    }


# -------------------- P&L --------------------

@router.get("/pl/portfolio", response_model=dict)
def portfolio_pl(
    months: Optional[int] = Query(default=None, ge=1, le=settings.pl_max_month_count),
    svc: PortfolioReportService = Depends(get_report_service),
):
    report = svc.generate_portfolio_pl_report(months)
    out = _payload(report)
    out["income_categories"] = get_income_categories(report)
    out["expense_categories"] = get_expense_categories(report)
    return out


@router.get("/pl/properties/{property_id}", response_model=dict)
def property_pl(
    property_id: str,
    months: Optional[int] = Query(default=None, ge=1, le=settings.pl_max_month_count),
    svc: PortfolioReportService = Depends(get_report_service),
):
    try:
        report = svc.generate_property_pl_report(property_id, months)
    except PropertyNotFound:
        raise HTTPException(status_code=404, detail="property not found")
    out = _payload(report)
    out["income_categories"] = get_income_categories(report)
    out["expense_categories"] = get_expense_categories(report)
    return out
