"""Route tests through FastAPI's TestClient with the store and insights client overridden."""

from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.api.v1.deps import (
    CurrentUser,
    get_change_feed,
    get_current_user,
    get_insights_client,
    get_ledger_store,
)
from app.core.config import settings
from app.infrastructure.db.repositories import ChangeFeed, LedgerRepository, MemoryLedgerRepository
from app.infrastructure.external.gst_insights_client import GstInsightsClient
from app.main import app

FILER = "27AAACB1234C1Z5"
DELHI = "07AAACA1111A1Z1"
XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _insights_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.startswith("/getGSTReturnFilingStatusSpecificYear/"):
        return httpx.Response(200, json={"data": {"fillingData": {"2024-2025": [
            {"returnPeriod": "042024", "returnType": "GSTR1", "dateOfFiling": "11-05-2024", "modeOfFiling": "Online"},
        ]}}})
    if request.url.path.startswith("/getGSTStatus/"):
        return httpx.Response(404, json={"message": "No records found"})
    return httpx.Response(200, json={"isValid": True, "data": {"lgnm": "Acme Traders"}})


@pytest.fixture
def store():
    return MemoryLedgerRepository()


@pytest.fixture
def api(store):
    insights = GstInsightsClient(
        base_url="https://insights.test",
        verify_base_url="https://verify.test",
        transport=httpx.MockTransport(_insights_handler),
    )
    app.dependency_overrides[get_current_user] = lambda: CurrentUser(id="user-1")
    app.dependency_overrides[get_ledger_store] = lambda: store
    app.dependency_overrides[get_insights_client] = lambda: insights
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client_id(api):
    resp = api.post("/api/v1/clients", json={"name": "Bharat Steels", "gstin": FILER})
    assert resp.status_code == 201
    return resp.json()["data"]["id"]


def _sale(number, date, pos, gstin=DELHI):
    return {
        "invoice_number": number,
        "customer_name": "Acme Traders",
        "customer_gstin": gstin,
        "place_of_supply": pos,
        "invoice_date": date,
        "invoice_value": "1180",
        "taxable_value": "1000",
        "gst_rate": "18",
    }


@pytest.fixture
def april_ledger(api, client_id):
    for body in (
        _sale("INV-001", "2024-04-10", "07"),
        _sale("INV-002", "2024-04-02", "27"),
        _sale("INV-003", "2024-04-05", "27", gstin=None),
        _sale("INV-000", "2024-03-28", "07"),
    ):
        assert api.post(f"/api/v1/clients/{client_id}/sales-invoices", json=body).status_code == 201
    return client_id


def test_health(api):
    resp = api.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


class TestClientsApi:

    def test_create_list_delete(self, api, client_id):
        listed = api.get("/api/v1/clients").json()
        assert listed["status"] == "ok"
        assert [c["gstin"] for c in listed["data"]] == [FILER]

        assert api.delete(f"/api/v1/clients/{client_id}").json()["message"] == "Client deleted"
        assert api.get("/api/v1/clients").json()["data"] == []

    def test_invalid_gstin_is_422_in_envelope(self, api):
        resp = api.post("/api/v1/clients", json={"name": "X", "gstin": "MHAAACB1234C1Z5"})
        assert resp.status_code == 422
        body = resp.json()
        assert body["status"] == "error"
        assert body["errors"][0]["field"] == "gstin"

    def test_unknown_client_is_404(self, api):
        resp = api.get("/api/v1/clients/missing/sales-invoices")
        assert resp.status_code == 404
        assert resp.json()["status"] == "error"


class TestInvoicesApi:

    def test_sales_round_trip(self, api, client_id):
        resp = api.post(f"/api/v1/clients/{client_id}/sales-invoices", json=_sale("INV-1", "2024-04-10", "07"))
        saved = resp.json()["data"]
        assert saved["customer_gstin"] == DELHI
        assert saved["invoice_date"] == "2024-04-10"

        listed = api.get(f"/api/v1/clients/{client_id}/sales-invoices").json()["data"]
        assert [i["id"] for i in listed] == [saved["id"]]

        api.delete(f"/api/v1/clients/{client_id}/sales-invoices/{saved['id']}")
        assert api.get(f"/api/v1/clients/{client_id}/sales-invoices").json()["data"] == []

    def test_invoice_value_below_taxable(self, api, client_id):
        body = _sale("INV-1", "2024-04-10", "07") | {"invoice_value": "900"}
        resp = api.post(f"/api/v1/clients/{client_id}/sales-invoices", json=body)
        assert resp.status_code == 422
        assert resp.json()["errors"][0]["field"] == "invoice_value"

    def test_purchases(self, api, client_id):
        body = {
            "invoice_number": "P-1",
            "supplier_name": "Zen",
            "supplier_gstin": "27AAACZ2222B1Z2",
            "invoice_date": "2024-04-03",
            "taxable_value": "500",
            "itc_claimed": "90",
        }
        saved = api.post(f"/api/v1/clients/{client_id}/purchase-invoices", json=body).json()["data"]
        listed = api.get(f"/api/v1/clients/{client_id}/purchase-invoices").json()["data"]
        assert [p["id"] for p in listed] == [saved["id"]]

        resp = api.delete(f"/api/v1/clients/{client_id}/purchase-invoices/{saved['id']}")
        assert resp.status_code == 200
        resp = api.delete(f"/api/v1/clients/{client_id}/purchase-invoices/{saved['id']}")
        assert resp.status_code == 404


class TestGstr1Api:

    def test_build(self, api, april_ledger):
        data = api.post(f"/api/v1/clients/{april_ledger}/gstr1", json={"year": 2024, "month": 4}).json()["data"]

        doc = data["document"]
        assert doc["fp"] == "042024"
        assert doc["cur_gt"] == 3540.0
        assert [inv["inum"] for inv in doc["b2b"][0]["inv"]] == ["INV-002", "INV-001"]
        assert data["summary"]["b2c_invoices"] == 1
        assert "B2B invoices: 2" in data["text"]

    def test_export(self, api, april_ledger):
        resp = api.post(f"/api/v1/clients/{april_ledger}/gstr1/export", json={"year": 2024, "month": 4})
        assert resp.status_code == 200
        assert resp.headers["content-disposition"] == f'attachment; filename="GSTR1_{FILER}_042024.json"'
        assert resp.json()["gstin"] == FILER

    def test_bad_month(self, api, april_ledger):
        resp = api.post(f"/api/v1/clients/{april_ledger}/gstr1", json={"year": 2024, "month": 13})
        assert resp.status_code == 422
        assert resp.json()["errors"][0]["field"] == "period"


class TestGstr2bAndGstr3bApi:

    def test_parse_upload(self, api, gstr2b_bytes):
        resp = api.post("/api/v1/gstr2b/parse", files={"file": ("gstr2b.xlsx", gstr2b_bytes, XLSX)})
        data = resp.json()["data"]
        assert [s["gstin"] for s in data["suppliers"]] == [DELHI, "27AAACZ2222B1Z2"]
        assert data["total_claimed"] == 360.5

    def test_unreadable_upload_is_400(self, api):
        resp = api.post("/api/v1/gstr2b/parse", files={"file": ("gstr2b.xlsx", b"not excel", XLSX)})
        assert resp.status_code == 400
        assert resp.json()["status"] == "error"

    def test_oversized_upload(self, api, gstr2b_bytes, monkeypatch):
        monkeypatch.setattr(settings, "MAX_UPLOAD_BYTES", 10)
        resp = api.post("/api/v1/gstr2b/parse", files={"file": ("gstr2b.xlsx", gstr2b_bytes, XLSX)})
        assert resp.status_code == 413

    def test_gstr3b_with_toggled_rows(self, api, april_ledger, gstr2b_bytes):
        suppliers = api.post(
            "/api/v1/gstr2b/parse", files={"file": ("gstr2b.xlsx", gstr2b_bytes, XLSX)}
        ).json()["data"]["suppliers"]
        suppliers[1]["is_claimed"] = False

        body = {"year": 2024, "month": 4, "itc_rows": suppliers}
        data = api.post(f"/api/v1/clients/{april_ledger}/gstr3b", json=body).json()["data"]

        doc = data["document"]
        assert doc["sup_details"]["osup_det"]["txval"] == 3000.0
        assert doc["itc_elg"]["itc_avl"] == [{"ty": "OTH", "iamt": 270.5, "camt": 0.0, "samt": 0.0}]
        assert data["summary"]["claimed_supplier_count"] == 1

        resp = api.post(f"/api/v1/clients/{april_ledger}/gstr3b/export", json=body)
        assert f"GSTR3B_{FILER}_042024.json" in resp.headers["content-disposition"]
        assert resp.json()["itc_elg"]["itc_net"]["iamt"] == 270.5


class TestInsightsApi:

    def test_filing_status(self, api):
        resp = api.get(f"/api/v1/insights/filing-status/{FILER}", params={"financial_year": "2024-25"})
        rows = resp.json()["data"]["rows"]
        assert rows[0]["month"] == "April"
        assert rows[0]["gstr1_status"] == "Filed"

    def test_filing_status_bad_year(self, api):
        resp = api.get(f"/api/v1/insights/filing-status/{FILER}", params={"financial_year": "24"})
        assert resp.status_code == 422

    def test_status_error_is_a_tagged_result(self, api):
        resp = api.get(f"/api/v1/insights/status/{FILER}")
        assert resp.status_code == 200
        assert resp.json()["data"] == {"ok": False, "data": None, "error": "No records found"}

    def test_verify_supplier(self, api):
        data = api.get(f"/api/v1/insights/verify-supplier/{DELHI}").json()["data"]
        assert data == {"verified": True, "legal_name": "Acme Traders", "message": "Verified: Acme Traders"}

    def test_details(self, api):
        data = api.get("/api/v1/insights/details", params={"search_type": "pan", "value": ""}).json()["data"]
        assert data["error"] == "Please enter a value to search."

    def test_financial_years(self, api):
        years = api.get("/api/v1/insights/financial-years").json()["data"]
        assert len(years) == 5


class TestAuth:

    def test_missing_token(self, api):
        app.dependency_overrides.pop(get_current_user)
        resp = api.get("/api/v1/clients")
        assert resp.status_code == 401

    def test_token_subject_is_the_owner(self, event_loop):
        token = jwt.encode({"sub": "owner-42"}, settings.USER_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
        user = event_loop.run_until_complete(get_current_user(authorization=f"Bearer {token}"))
        assert user == CurrentUser(id="owner-42")

    def test_bad_signature(self, event_loop):
        from fastapi import HTTPException

        token = jwt.encode({"sub": "owner-42"}, "some-other-secret", algorithm="HS256")
        with pytest.raises(HTTPException) as exc_info:
            event_loop.run_until_complete(get_current_user(authorization=f"Bearer {token}"))
        assert exc_info.value.status_code == 401


class TestLedgerStoreDependency:

    def test_change_feed_comes_from_app_state(self):
        request = SimpleNamespace(app=app)
        assert get_change_feed(request) is app.state.change_feed

    def test_store_publishes_to_the_injected_feed(self, event_loop):
        feed = ChangeFeed()
        store = event_loop.run_until_complete(get_ledger_store(db=None, feed=feed))
        assert isinstance(store, LedgerRepository)
        assert store.feed is feed

        store.watch_sales_invoices("user-1", "c1", lambda: None)
        assert feed.subscriber_count(("sales", "user-1", "c1")) == 1
