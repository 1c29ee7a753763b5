# backend/portfolio_reporting/main.py
from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .domain.report_cache import ReportCache
from .logging_config import configure_logging

from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.health import router as health_router
from .routers.reports import router as reports_router

API_PREFIX = "/api"


def _cors_origins() -> list[str]:
    val = getattr(settings, "cors_allow_origins", ["*"])
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    if isinstance(val, list) and val:
        return val
    return ["*"]


def create_app(*, report_cache: Optional[ReportCache] = None, setup_logging: bool = True) -> FastAPI:
    if setup_logging:
        configure_logging()

    app = FastAPI(
        title="Portfolio Reporting",
        version=settings.report_version,
    )

    # one cache per app; shared by every request's PortfolioReportService
    app.state.report_cache = report_cache or ReportCache(ttl_seconds=settings.report_cache_ttl_seconds)

    # added last = outermost, so request_id is set before the request log line
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix=API_PREFIX)
    app.include_router(reports_router, prefix=API_PREFIX)
    return app


app = create_app()
