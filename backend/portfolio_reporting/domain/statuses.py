from __future__ import annotations

# Properties that generate (or can generate) income. Included in portfolio reports.
OPERATIONAL_STATUSES: tuple[str, ...] = (
    "Operational",
    "Needs Tenant",
    "Selling",
    "Rehab",
    "Closed",
)

# Acquisition pipeline stages. Excluded from portfolio reports.
NON_OPERATIONAL_STATUSES: tuple[str, ...] = (
    "Opportunity",
    "Soft Offer",
    "Hard Offer",
)

# Ledger entries for these properties are left out of the portfolio P&L.
# Stored data mixes "Soft offer" and "Soft Offer", so this one matches case-insensitively.
PL_EXCLUDED_STATUSES: frozenset[str] = frozenset({"soft offer", "hard offer", "opportunity"})

UNIT_BEHIND_ON_RENT = "Behind On Rent"
UNIT_VACANT = "Vacant"


def is_operational_property(status: str | None) -> bool:
    """Exact, case-sensitive match against OPERATIONAL_STATUSES."""
    return status in OPERATIONAL_STATUSES


def is_pl_excluded_status(status: str | None) -> bool:
    return (status or "").strip().casefold() in PL_EXCLUDED_STATUSES
