"""HTTP API tests over the fake Sheets backend."""

import pytest

from procurement_dashboard.config import settings
from procurement_dashboard.core.errors import WriteFailedError
from procurement_dashboard.models.analysis import GenerationResponse

BASE = "/api/companies/c1"


class TestHealthAndSession:

    def test_health_reports_mock_mode_when_signed_out(self, api):
        body = api.get("/api/health").json()
        assert body["status"] == "degraded"
        assert body["data_mode"] == "mock"

    def test_token_handover_switches_to_live(self, api):
        response = api.post("/api/session/token", json={"access_token": "tok", "expires_in": 3600})
        assert response.status_code == 200
        assert response.json()["state"] == "active"
        assert "tok" not in response.text
        assert api.get("/api/health").json()["data_mode"] == "live"

    def test_begin_then_sign_out(self, api):
        assert api.post("/api/session/begin").json()["state"] == "pending"
        assert api.delete("/api/session").json()["state"] == "unset"

    def test_empty_token_is_rejected(self, api):
        assert api.post("/api/session/token", json={"access_token": ""}).status_code == 422


class TestApiKey:

    def test_missing_key_is_forbidden(self, api, monkeypatch):
        from procurement_dashboard.main import app
        from procurement_dashboard.security import get_api_key

        monkeypatch.setattr(settings, "API_KEY", "secret")
        del app.dependency_overrides[get_api_key]
        assert api.get("/api/companies").status_code == 403
        assert api.get("/api/companies", headers={"X-API-Key": "secret"}).status_code == 200


class TestCompanies:

    def test_list_companies(self, api):
        ids = [c["id"] for c in api.get("/api/companies").json()]
        assert ids == ["c1", "c2", "c3"]

    def test_admin_profile(self, api):
        assert api.get(f"{BASE}/admin-profile").json()["country"] == "Italia"

    def test_unknown_company(self, api):
        response = api.get("/api/companies/c9/items")
        assert response.status_code == 404
        assert response.json()["code"] == "unknown_company"


class TestMasterData:

    def test_mock_items_page(self, api, backend):
        body = api.get(f"{BASE}/items", params={"page": 1, "page_size": 2}).json()
        assert body["total"] == 5
        assert [i["row_index"] for i in body["data"]] == [2, 3]
        assert backend.calls == []

    def test_bearer_token_reads_live(self, api, backend):
        response = api.get(f"{BASE}/suppliers", headers={"Authorization": "Bearer live-token"})
        assert response.json()["total"] == 3
        assert backend.calls[0][2] == "live-token"

    def test_rejected_bearer_token_serves_seed_data(self, api, backend):
        backend.sheets["Fornitori"] = []
        backend.reject_tokens = True
        response = api.get(f"{BASE}/suppliers", headers={"Authorization": "Bearer revoked"})
        assert response.status_code == 200
        assert response.json()["total"] == 3

    def test_search(self, api):
        body = api.get(f"{BASE}/customers", params={"search": "hera"}).json()
        assert [c["id"] for c in body["data"]] == ["CUST-03"]
        assert body["data"][0]["row_index"] is None

    def test_invalid_page(self, api):
        assert api.get(f"{BASE}/items", params={"page": 0}).status_code == 422

    def test_create_without_sign_in_is_401(self, api, backend):
        response = api.post(f"{BASE}/items", json={"sku": "NEW-1", "name": "Nuovo"})
        assert response.status_code == 401
        assert response.json()["code"] == "authentication_required"
        assert backend.writes == []

    def test_create_when_signed_in(self, api, backend, mock_session):
        mock_session.activate("tok")
        response = api.post(f"{BASE}/items", json={"sku": "NEW-1", "name": "Nuovo"})
        assert response.status_code == 201
        assert backend.writes[0][1] == "Articoli!A:A"

    def test_update_without_row_index_is_409(self, api, backend, mock_session):
        mock_session.activate("tok")
        response = api.put(f"{BASE}/suppliers", json={"id": "SUP-01", "name": "HydraForce"})
        assert response.status_code == 409
        assert response.json()["code"] == "missing_row_index"
        assert backend.writes == []

    def test_update_round_trip(self, api, mock_session):
        mock_session.activate("tok")
        customer = api.get(f"{BASE}/customers").json()["data"][0]
        customer["region"] = "Piemonte"
        assert api.put(f"{BASE}/customers", json=customer).status_code == 200
        assert api.get(f"{BASE}/customers").json()["data"][0]["region"] == "Piemonte"

    def test_write_failure_is_502(self, api, backend, mock_session):
        mock_session.activate("tok")
        backend.fail_writes = WriteFailedError("Write to Articoli!A:A rejected: HTTP 500")
        response = api.post(f"{BASE}/items", json={"sku": "NEW-1"})
        assert response.status_code == 502
        assert response.json()["code"] == "write_failed"


class TestPlanningAndOperations:

    def test_mrp(self, api):
        body = api.get(f"{BASE}/mrp", params={"page_size": 2}).json()
        assert body["total"] == 5
        assert len(body["data"]) == 2
        assert body["summary"]["shortage_count"] == 2

    def test_orders(self, api):
        body = api.get(f"{BASE}/orders").json()
        assert [o["id"] for o in body["data"]] == ["PO-2023-1001", "PO-2023-1015"]

    def test_logistics_search(self, api):
        body = api.get(f"{BASE}/logistics", params={"search": "bartolini"}).json()
        assert [e["id"] for e in body["data"]] == ["LOG-001"]


class TestAnalysis:

    def test_overview_with_ai_fallback(self, api):
        body = api.get(f"{BASE}/overview").json()
        assert body["item_count"] == 5
        assert body["supplier_count"] == 3
        assert body["shortage_count"] == 2
        assert body["total_inventory_value"] == pytest.approx(12 * 150 + 500 * 45 + 5 * 800 + 50 * 20 + 1000 * 0.5)
        assert body["category_spend"][0]["category"] == "Carpenteria"
        assert body["analysis"]["degraded"] is True

    def test_scouting_item_uses_supplier_name(self, api, generator):
        generator.error = None
        generator.response = GenerationResponse(free_text="Candidati")
        response = api.post("/api/ai/scouting", json={"company_id": "c1", "mode": "ITEM", "target_id": "HYD-VAL-001"})
        assert response.status_code == 200
        assert response.json()["analysis_text"] == "Candidati"
        assert "HydraForce Italia" in generator.requests[0].user_prompt

    def test_scouting_unknown_target(self, api):
        response = api.post("/api/ai/scouting", json={"company_id": "c1", "mode": "SUPPLIER", "target_id": "SUP-99"})
        assert response.status_code == 404

    def test_engagement_fallback(self, api):
        response = api.post(
            "/api/ai/engagement",
            json={"doc_type": "RFI", "candidate_name": "Parker", "item_name": "Valvola", "company_name": "EcoCompact Spa"},
        )
        assert response.status_code == 200
        assert response.json()["degraded"] is True
