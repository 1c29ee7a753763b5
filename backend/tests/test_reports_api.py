# backend/tests/test_reports_api.py
from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient

from portfolio_reporting.cli.seed_demo import seed_demo
from portfolio_reporting.domain.pl_report import month_key, shift_month
from portfolio_reporting.domain.report_cache import ReportCache
from portfolio_reporting.main import create_app


def _client() -> TestClient:
    return TestClient(create_app(report_cache=ReportCache(), setup_logging=False))


def test_health_and_request_id(fresh_db):
    client = _client()

    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["ok"] is True
    assert r.headers["X-Request-ID"]

    r = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"


def test_empty_portfolio_reports_warning_and_no_csv(fresh_db):
    client = _client()

    body = client.get("/api/reports/cash-flow").json()
    assert body["data"] is None
    assert body["has_warnings"] is True
    assert body["errors"][0]["message"] == "No active properties found for cash flow analysis"

    assert client.get("/api/reports/cash-flow.csv").status_code == 404
    assert client.get("/api/reports/assets.csv").status_code == 404


def test_seed_demo_counts(fresh_db):
    out = seed_demo(months=6)
    assert out.properties == 4
    # rent + mortgage for the two rented properties, plus one business and one capital row
    assert out.transactions == 6 * 2 * 2 + 2


def test_cash_flow_and_asset_reports_over_seeded_portfolio(fresh_db):
    seed_demo(months=6)
    client = _client()

    cf = client.get("/api/reports/cash-flow").json()
    assert cf["errors"] == []
    addresses = [p["address"] for p in cf["data"]["properties"]]
    assert "57 Fairview St" not in addresses  # Soft Offer
    assert len(addresses) == 3

    s = cf["data"]["summary"]
    assert s["current_total_rent_income"] == 1350 + 2300
    assert s["current_total_expenses"]["total"] == 930 + 1810 + 290
    assert s["current_total_net_cash_flow"] == 3650 - 3030
    assert s["total_behind_rent_units"] == 1

    assets = client.get("/api/reports/assets").json()["data"]["summary"]
    assert assets["total_property_value"] == 120_000 + 210_000 + 128_000
    assert assets["total_loan_value"] == 78_000 + 150_000
    assert assets["total_equity"] == 458_000 - 228_000

    both = client.get("/api/reports/all").json()
    assert set(both) == {"cash_flow", "assets", "headline"}
    assert both["headline"]["current_net_cash_flow"] == "$620"
    assert both["headline"]["total_equity"] == "$230,000"
    assert both["headline"]["average_equity_percent"] == "50.2%"

    assert client.post("/api/reports/refresh").json() == {"ok": True}


def test_csv_downloads(fresh_db):
    seed_demo(months=6)
    client = _client()

    r = client.get("/api/reports/cash-flow.csv", params={"scenario": "potential"})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "cash-flow-potential.csv" in r.headers["content-disposition"]
    lines = r.text.split("\n")
    assert lines[0].startswith("Address,Status,Potential Monthly Rent")
    assert lines[-1].startswith("TOTAL,,5850.00,")

    r = client.get("/api/reports/assets.csv")
    assert r.text.split("\n")[-1] == "TOTAL,,458000.00,228000.00,230000.00,50.22"

    assert client.get("/api/reports/cash-flow.csv", params={"scenario": "bogus"}).status_code == 422


def test_validate_endpoint(fresh_db):
    seed_demo(months=6)
    body = _client().post("/api/reports/validate").json()
    assert body["valid_count"] == 4
    assert body["invalid"] == []
    assert body["warnings"] == []


def test_pl_endpoints(fresh_db):
    seed_demo(months=6)
    client = _client()

    pl = client.get("/api/reports/pl/portfolio", params={"months": 3}).json()
    assert len(pl["months"]) == 3
    assert pl["months"][-1]["month"] == month_key(date.today())

    last = pl["last_full_month"]
    assert last["month"] == month_key(shift_month(date.today(), -1))
    assert last["total_income"] == 1350 + 2300
    # mortgages plus the business software charge; the capital roof is left out
    assert last["total_expenses"] == 540 + 1010 + 49
    assert "Roof" not in last["expenses_by_category"]
    assert pl["income_categories"] == ["Rent Income"]
    assert pl["expense_categories"] == ["Mortgage", "Software"]

    oakman = next(b for b in pl["property_breakdowns"] if b["property_address"] == "1418 Oakman Blvd")
    prop = client.get(f"/api/reports/pl/properties/{oakman['property_id']}").json()
    assert prop["property_address"] == "1418 Oakman Blvd"
    assert len(prop["months"]) == 6
    assert all(m["net_income"] == 1350 - 540 for m in prop["months"])
    assert prop["six_month_average"]["net_income"] == 810

    assert client.get("/api/reports/pl/properties/does-not-exist").status_code == 404
    assert client.get("/api/reports/pl/portfolio", params={"months": 0}).status_code == 422
