# backend/portfolio_reporting/domain/report_cache.py
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from .portfolio import (
    PortfolioAssetReport,
    PortfolioCashFlowReport,
    ReportGenerationResult,
    aggregate_asset_data,
    aggregate_cash_flow_data,
)

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 5 * 60

_CASH_FLOW = "cash_flow"
_ASSETS = "assets"


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    data: T
    timestamp: float
    properties_hash: str


def properties_hash(properties: Iterable[Any]) -> str:
    """
    Cache key for a property set.

    Only id, address, status, actual_rent, current_house_value and
    current_loan_value take part. Edits to monthly_expenses, potential_rent or
    units alone do NOT change the key, so they stay invisible until the TTL
    runs out or the cache is cleared.
    """
    return "|".join(
        f"{p.id}-{p.address}-{p.status}-{p.actual_rent}-{p.current_house_value}-{p.current_loan_value}"
        for p in properties
    )


class ReportCache:
    """
    Two-slot memo (cash flow, assets) for portfolio reports.

    Owned by whoever serves reports (one per app); tests build their own with a
    fake clock. Slot access is locked since sync FastAPI handlers run in a
    threadpool.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.time) -> None:
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._lock = threading.Lock()
        self._slots: dict[str, CacheEntry] = {}

    def _lookup(self, slot: str, key: str) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._slots.get(slot)
        if entry is None or entry.properties_hash != key:
            return None
        if self._clock() - entry.timestamp >= self.ttl_seconds:
            return None
        return entry

    def _store(self, slot: str, key: str, data: Any) -> None:
        with self._lock:
            self._slots[slot] = CacheEntry(data=data, timestamp=self._clock(), properties_hash=key)

    def _get_or_compute(self, slot: str, properties: list[Any], compute) -> ReportGenerationResult:
        key = properties_hash(properties)
        entry = self._lookup(slot, key)
        if entry is not None:
            log.debug("report cache hit", extra={"report_type": slot, "cache_hit": True})
            return ReportGenerationResult(data=entry.data, errors=[], has_warnings=False)

        log.debug("report cache miss", extra={"report_type": slot, "cache_hit": False})
        result = compute(properties)
        if result.data is not None:
            self._store(slot, key, result.data)
        return result

    def get_cached_cash_flow_report(self, properties: Iterable[Any]) -> ReportGenerationResult[PortfolioCashFlowReport]:
        return self._get_or_compute(_CASH_FLOW, list(properties), aggregate_cash_flow_data)

    def get_cached_asset_report(self, properties: Iterable[Any]) -> ReportGenerationResult[PortfolioAssetReport]:
        return self._get_or_compute(_ASSETS, list(properties), aggregate_asset_data)

    def peek(self, slot: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._slots.get(slot)

    def clear(self) -> None:
        with self._lock:
            self._slots = {}
