# backend/portfolio_reporting/services/portfolio_report_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

from ..config import settings
from ..domain.csv_export import export_to_csv
from ..domain.pl_report import (
    PortfolioPLReport,
    PropertyPLReport,
    generate_portfolio_pl_report,
    generate_property_pl_report,
)
from ..domain.portfolio import (
    PortfolioAssetReport,
    PortfolioCashFlowReport,
    ReportError,
    ReportGenerationResult,
)
from ..domain.report_cache import ReportCache
from ..schemas import PropertyRecord
from .portfolio_repository import PortfolioSource

log = logging.getLogger(__name__)


class PropertyNotFound(LookupError):
    pass


@dataclass(frozen=True)
class PropertyValidation:
    valid: list[PropertyRecord] = field(default_factory=list)
    invalid: list[PropertyRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _failed(message: str, exc: BaseException) -> ReportGenerationResult:
    return ReportGenerationResult(
        data=None,
        errors=[ReportError(message=message, details=str(exc) or type(exc).__name__)],
        has_warnings=True,
    )


def _no_active(kind: str) -> ReportGenerationResult:
    return ReportGenerationResult(
        data=None,
        errors=[ReportError(message=f"No active properties found for {kind} analysis")],
        has_warnings=True,
    )


def _month_count(month_count: Optional[int]) -> int:
    return settings.pl_default_month_count if month_count is None else month_count


class PortfolioReportService:
    """
    Fetches report inputs and runs them through the aggregation pipeline.

    The cache is passed in so one instance can be shared across requests
    (see routers/reports.py) while each request gets its own repository.
    Upstream failures never escape as exceptions from the report methods;
    they come back as a single ReportError without a property id.
    """

    def __init__(self, repository: PortfolioSource, cache: ReportCache) -> None:
        self.repository = repository
        self.cache = cache

    def _active_properties(self) -> list[PropertyRecord]:
        return [p for p in self.repository.list_properties() if not p.archived]

    def generate_cash_flow_report(self) -> ReportGenerationResult[PortfolioCashFlowReport]:
        try:
            properties = self._active_properties()
            if not properties:
                return _no_active("cash flow")
            result = self.cache.get_cached_cash_flow_report(properties)
        except Exception as e:
            log.exception("cash flow report failed", extra={"report_type": "cash_flow"})
            return _failed("Failed to generate cash flow report", e)

        if result.errors:
            log.warning(
                "cash flow report generated with errors",
                extra={"report_type": "cash_flow", "error_count": len(result.errors)},
            )
        return result

    def generate_asset_report(self) -> ReportGenerationResult[PortfolioAssetReport]:
        try:
            properties = self._active_properties()
            if not properties:
                return _no_active("asset")
            result = self.cache.get_cached_asset_report(properties)
        except Exception as e:
            log.exception("asset report failed", extra={"report_type": "assets"})
            return _failed("Failed to generate asset report", e)

        if result.errors:
            log.warning(
                "asset report generated with errors",
                extra={"report_type": "assets", "error_count": len(result.errors)},
            )
        return result

    def generate_all_reports(self) -> dict[str, ReportGenerationResult]:
        return {
            "cash_flow": self.generate_cash_flow_report(),
            "assets": self.generate_asset_report(),
        }

    def refresh_reports(self) -> None:
        self.cache.clear()
        log.info("report cache cleared")

    def get_properties_for_reports(self) -> list[PropertyRecord]:
        try:
            return self._active_properties()
        except Exception:
            log.exception("failed to fetch properties for reports")
            return []

    def validate_property_data(self, properties: list[PropertyRecord]) -> PropertyValidation:
        """
        Completeness check before reporting. Missing address/status makes a
        property invalid; missing rent, price or value data only warns.
        """
        out = PropertyValidation()
        for p in properties:
            is_valid = True
            problems: list[str] = []

            if not (p.address or "").strip():
                is_valid = False
                problems.append("Missing address")
            if not p.status:
                is_valid = False
                problems.append("Missing status")

            if (p.potential_rent or 0) <= 0 and (p.actual_rent or 0) <= 0:
                problems.append("No rent data available")
            if (p.offer_price or 0) <= 0:
                problems.append("No offer price data")
            if (p.arv or 0) <= 0 and (p.current_house_value or 0) <= 0:
                problems.append("No property value data available")

            if problems:
                out.warnings.append(f"{p.address}: {', '.join(problems)}")
            (out.valid if is_valid else out.invalid).append(p)
        return out

    # -------------------- P&L --------------------

    def generate_property_pl_report(
        self,
        property_id: str,
        month_count: Optional[int] = None,
        *,
        as_of: Optional[date] = None,
    ) -> PropertyPLReport:
        prop = next(
            (p for p in self.repository.list_properties(include_archived=True) if p.id == property_id),
            None,
        )
        if prop is None:
            raise PropertyNotFound(property_id)

        return generate_property_pl_report(
            self.repository.list_transactions(property_id=property_id),
            prop.id,
            prop.address,
            _month_count(month_count),
            as_of=as_of,
        )

    def generate_portfolio_pl_report(
        self,
        month_count: Optional[int] = None,
        *,
        as_of: Optional[date] = None,
    ) -> PortfolioPLReport:
        return generate_portfolio_pl_report(
            self.repository.list_transactions(),
            self.repository.list_properties(include_archived=True),
            _month_count(month_count),
            as_of=as_of,
        )

    # -------------------- Export --------------------

    def export_to_csv(self, report_type: str, report: Optional[Any], scenario: str = "current") -> str:
        return export_to_csv(report_type, report, scenario)
