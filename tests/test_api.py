"""
Tests for the calculation and project API endpoints.
"""

import json

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.storage import StorageError, get_project_store
from app.storage.memory import MemoryProjectStore

# The project store is replaced with an in-memory one by conftest.py


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def saved_project(client):
    """Save a default project through the API."""
    defaults = client.get("/api/projects/defaults").json()["project"]
    response = client.post("/api/projects/", json=defaults)
    assert response.status_code == 201
    return response.json()["project"]


# ============================================================================
# CALCULATION API TESTS
# ============================================================================


class TestCalculationAPI:
    """Test the pro forma calculation endpoint."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_calculate_defaults(self, client):
        project = client.get("/api/projects/defaults").json()["project"]
        response = client.post(
            "/api/calculate/proforma",
            json={
                "inputs": project["inputs"],
                "renovationItems": project["renovationItems"],
                "financingSources": project["financingSources"],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["totalRenovation"] == pytest.approx(34100)
        assert data["netProfit"] == pytest.approx(60518.66, abs=0.01)
        assert data["roi"] == pytest.approx(43.60, abs=0.01)
        assert [d["sourceId"] for d in data["financingDetails"]] == [1, 2]

    def test_calculate_empty(self, client):
        response = client.post("/api/calculate/proforma", json={})
        assert response.status_code == 200
        data = response.json()
        assert data["baseRenovation"] == 0
        assert data["totalLoanAmount"] == 0
        assert data["totalEquity"] == data["totalCosts"]

    def test_zero_hold_returns_null_irr(self, client):
        response = client.post(
            "/api/calculate/proforma", json={"inputs": {"holdPeriodWeeks": 0}}
        )
        assert response.status_code == 200
        assert response.json()["irr"] is None

    def test_invalid_input(self, client):
        response = client.post(
            "/api/calculate/proforma", json={"inputs": {"purchasePrice": "cheap"}}
        )
        assert response.status_code == 422


# ============================================================================
# PROJECT API TESTS
# ============================================================================


class TestProjectAPI:
    """Test project persistence endpoints."""

    def test_defaults(self, client):
        response = client.get("/api/projects/defaults")
        assert response.status_code == 200
        data = response.json()
        assert data["project"]["projectName"] == "Terrace Way"
        assert data["project"]["id"] is None
        assert len(data["project"]["renovationItems"]) == 4

    def test_create_and_get(self, client, saved_project):
        assert saved_project["id"].startswith("project:terrace-way:")
        response = client.get(f"/api/projects/{saved_project['id']}")
        assert response.status_code == 200
        assert response.json()["project"]["id"] == saved_project["id"]

    def test_list(self, client, saved_project):
        response = client.get("/api/projects/")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["projects"][0]["id"] == saved_project["id"]
        assert data["projects"][0]["netProfit"] == pytest.approx(60518.66, abs=0.01)

    def test_get_missing(self, client):
        response = client.get("/api/projects/project:missing:1")
        assert response.status_code == 404

    def test_replace(self, client, saved_project):
        body = dict(saved_project, projectName="Renamed")
        response = client.put(f"/api/projects/{saved_project['id']}", json=body)
        assert response.status_code == 200
        assert response.json()["project"]["projectName"] == "Renamed"
        assert response.json()["project"]["id"] == saved_project["id"]

    def test_delete(self, client, saved_project):
        response = client.delete(f"/api/projects/{saved_project['id']}")
        assert response.status_code == 200
        assert response.json() == {"deleted": True, "id": saved_project["id"]}
        assert client.get(f"/api/projects/{saved_project['id']}").status_code == 404

    def test_delete_missing(self, client):
        assert client.delete("/api/projects/project:missing:1").status_code == 404

    def test_save_as(self, client, saved_project):
        response = client.post(
            f"/api/projects/{saved_project['id']}/save-as", json={"name": "Copy"}
        )
        assert response.status_code == 201
        assert response.json()["project"]["id"].startswith("project:copy:")
        assert client.get("/api/projects/").json()["total"] == 2

    def test_proforma(self, client, saved_project):
        response = client.get(f"/api/projects/{saved_project['id']}/proforma")
        assert response.status_code == 200
        assert response.json()["totalLoanAmount"] == pytest.approx(364682.5)

    def test_export_and_import(self, client, saved_project):
        response = client.get(f"/api/projects/{saved_project['id']}/export")
        assert response.status_code == 200
        assert 'filename="Terrace-Way.json"' in response.headers["content-disposition"]
        assert "id" not in response.json()

        imported = client.post("/api/projects/import", content=response.content)
        assert imported.status_code == 201
        assert imported.json()["project"]["id"].startswith("project:imported:")

    def test_import_invalid(self, client):
        response = client.post("/api/projects/import", content=b"{not json")
        assert response.status_code == 422

    def test_storage_failure(self, client):
        class BrokenStore(MemoryProjectStore):
            async def list(self, prefix=""):
                raise StorageError("unreachable")

        app.dependency_overrides[get_project_store] = lambda: BrokenStore()
        response = client.get("/api/projects/")
        assert response.status_code == 503


# ============================================================================
# EDIT API TESTS
# ============================================================================


class TestProjectEditAPI:
    """Test copy-on-write edit endpoints."""

    def test_update_inputs(self, client, saved_project):
        response = client.patch(
            f"/api/projects/{saved_project['id']}/inputs",
            json={"purchasePrice": 400000},
        )
        assert response.status_code == 200
        inputs = response.json()["project"]["inputs"]
        assert inputs["purchasePrice"] == 400000
        assert inputs["arvPrice"] == 600000

    def test_toggle_financing_source(self, client, saved_project):
        response = client.patch(
            f"/api/projects/{saved_project['id']}/financing-sources/2",
            json={"enabled": False},
        )
        assert response.status_code == 200
        proforma = response.json()["proforma"]
        assert [d["sourceId"] for d in proforma["financingDetails"]] == [1]
        assert proforma["totalLoanAmount"] == pytest.approx(324682.5)

    def test_add_and_remove_financing_source(self, client, saved_project):
        url = f"/api/projects/{saved_project['id']}/financing-sources"
        added = client.post(url, json={"name": "Private Lender"})
        assert added.status_code == 201
        sources = added.json()["project"]["financingSources"]
        assert sources[-1]["id"] == 3
        assert sources[-1]["name"] == "Private Lender"

        removed = client.delete(f"{url}/3")
        assert removed.status_code == 200
        assert len(removed.json()["project"]["financingSources"]) == 2

    def test_unknown_financing_source(self, client, saved_project):
        response = client.patch(
            f"/api/projects/{saved_project['id']}/financing-sources/99",
            json={"enabled": False},
        )
        assert response.status_code == 404

    def test_renovation_item_edits(self, client, saved_project):
        url = f"/api/projects/{saved_project['id']}/renovation-items"
        added = client.post(url, json={"category": "Roof"})
        assert added.status_code == 201
        assert added.json()["project"]["renovationItems"][-1]["id"] == 5

        updated = client.patch(f"{url}/5", json={"labor": 2500})
        assert updated.status_code == 200
        # 31,000 plus the new item's labor
        assert updated.json()["proforma"]["baseRenovation"] == pytest.approx(33500)

        removed = client.delete(f"{url}/5")
        assert removed.json()["proforma"]["baseRenovation"] == pytest.approx(31000)

    def test_material_edits(self, client, saved_project):
        url = f"/api/projects/{saved_project['id']}/renovation-items/1/materials"
        added = client.post(url, json={"name": "Grout", "cost": 150})
        assert added.status_code == 201
        materials = added.json()["project"]["renovationItems"][0]["materials"]
        assert materials[-1] == {"name": "Grout", "cost": 150}

        updated = client.patch(f"{url}/2", json={"cost": 200})
        assert updated.json()["project"]["renovationItems"][0]["materials"][2]["cost"] == 200

        removed = client.delete(f"{url}/0")
        names = [m["name"] for m in removed.json()["project"]["renovationItems"][0]["materials"]]
        assert names == ["Underlayment", "Grout"]

    def test_edit_missing_project(self, client):
        response = client.patch(
            "/api/projects/project:missing:1/inputs", json={"arvPrice": 1}
        )
        assert response.status_code == 404


# ============================================================================
# JSON OUTPUT TESTS
# ============================================================================


def reject_constant(token):
    raise ValueError(f"non-standard JSON token {token}")


class TestStrictJSON:
    """Test that responses never contain Infinity or NaN tokens."""

    def test_non_finite_input_returned_as_null(self, client):
        response = client.post(
            "/api/projects/",
            content=b'{"inputs": {"purchasePrice": 1e999}}',
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 201
        data = json.loads(response.text, parse_constant=reject_constant)
        assert data["project"]["inputs"]["purchasePrice"] is None
        assert data["project"]["inputs"]["arvPrice"] == 600000
        assert data["proforma"]["totalCosts"] is None

        loaded = client.get(f"/api/projects/{data['project']['id']}")
        assert loaded.status_code == 200
        json.loads(loaded.text, parse_constant=reject_constant)

    def test_export_keeps_non_finite_input(self, client):
        created = client.post(
            "/api/projects/",
            content=b'{"inputs": {"purchasePrice": 1e999}}',
            headers={"Content-Type": "application/json"},
        ).json()["project"]
        exported = client.get(f"/api/projects/{created['id']}/export")
        assert json.loads(exported.text)["inputs"]["purchasePrice"] == float("inf")

    def test_foreign_id_rejected(self, client):
        defaults = client.get("/api/projects/defaults").json()["project"]
        response = client.post("/api/projects/", json=dict(defaults, id="foo"))
        assert response.status_code == 422
        assert client.get("/api/projects/").json()["total"] == 0
