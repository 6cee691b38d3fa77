"""End-to-end tests for the HTTP surface"""
import pytest
from fastapi.testclient import TestClient

from fleet_induction.api import depot
from fleet_induction.config import settings
from fleet_induction.main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def _reset_depot(monkeypatch):
    monkeypatch.setattr(depot, "depot_manager", None)
    monkeypatch.setattr(settings, "api_key", None)


def _layout_body():
    return {
        "layout": {"rows": 1, "columns": 2, "bayPrefix": ["A"]},
        "bays": [
            {"id": "A1", "x": 0, "y": 0, "type": "service", "cleaningCapacity": False, "occupied": "KMRL-001"},
            {"id": "A2", "x": 1, "y": 0, "type": "standby", "cleaningCapacity": True, "occupied": None},
        ],
        "cleaningSlots": {"available": 1, "total": 2, "manpower": {"shift1": 2, "shift2": 1}},
    }


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_run_optimization_ranks_and_reports_errors(make_record, now):
    bad = make_record(train_id="KMRL-003")
    bad["last_cleaned"] = "not-a-date"
    body = {
        "trains": [make_record(train_id="KMRL-001", rs_days=3), make_record(train_id="KMRL-002"), bad],
        "now": now.isoformat(),
    }

    response = client.post("/api/optimization/run", json=body)

    assert response.status_code == 200
    data = response.json()
    assert [r["train_id"] for r in data["results"]] == ["KMRL-002", "KMRL-001"]
    assert [r["induction_rank"] for r in data["results"]] == [1, 2]
    assert data["results"][0]["recommended_status"] == "service"
    assert data["results"][1]["conflicts"][0]["severity"] == "advisory"
    assert data["errors"][0]["train_id"] == "KMRL-003"
    assert data["errors"][0]["error_type"] == "MalformedInputError"
    assert data["kpis"]["total_trains"] == 2


def test_run_optimization_accepts_parameters(make_record, now):
    body = {"trains": [make_record(rs_days=10)], "now": now.isoformat(), "parameters": {"fitnessBuffer": 14}}

    response = client.post("/api/optimization/run", json=body)

    assert response.status_code == 200
    assert response.json()["results"][0]["breakdown"]["fitness"] == 10
    assert response.json()["parameters"]["fitness_buffer"] == 14


def test_run_optimization_rejects_out_of_range_parameters(make_record, now):
    body = {"trains": [make_record()], "now": now.isoformat(), "parameters": {"cleaningSlots": 9}}
    assert client.post("/api/optimization/run", json=body).status_code == 422


def test_whatif_endpoint(make_record, now):
    body = {
        "trains": [make_record(train_id="KMRL-001"), make_record(train_id="KMRL-002", rs_days=10)],
        "now": now.isoformat(),
        "scenario": {"parameters": {"fitnessBuffer": 14}},
    }

    response = client.post("/api/simulation/whatif", json=body)

    assert response.status_code == 200
    data = response.json()
    assert len(data["results"]) == 2
    assert data["status_changes"] == [{"train_id": "KMRL-002", "baseline": "service", "scenario": "standby"}]


def test_whatif_rejects_invalid_parameters(make_record, now):
    body = {"trains": [make_record()], "now": now.isoformat(), "scenario": {"parameters": {"mileageWeight": 1}}}
    assert client.post("/api/simulation/whatif", json=body).status_code == 422


@pytest.mark.parametrize(
    "scenario",
    [
        {"override_train_attributes": ["KMRL-001"]},
        {"override_train_attributes": {"KMRL-001": "fitness_expiry.rolling_stock"}},
        {"parameters": "aggressive"},
    ],
)
def test_whatif_rejects_badly_shaped_scenario(make_record, now, scenario):
    body = {"trains": [make_record()], "now": now.isoformat(), "scenario": scenario}
    assert client.post("/api/simulation/whatif", json=body).status_code == 422


def test_whatif_accepts_camel_case_overrides(make_record, now):
    body = {
        "trains": [make_record(train_id="KMRL-001")],
        "now": now.isoformat(),
        "scenario": {"overrideTrainAttributes": {"KMRL-001": {"job_cards": [
            {"id": "JC-9", "type": "brake", "status": "open", "priority": "critical"},
        ]}}},
    }

    response = client.post("/api/simulation/whatif", json=body)

    assert response.status_code == 200
    assert response.json()["status_changes"] == [{"train_id": "KMRL-001", "baseline": "service", "scenario": "IBL"}]


def test_run_optimization_reports_non_string_train_id(make_record, now):
    bad = make_record()
    bad["train_id"] = 7
    body = {"trains": [bad, make_record(train_id="KMRL-002")], "now": now.isoformat()}

    response = client.post("/api/optimization/run", json=body)

    assert response.status_code == 200
    data = response.json()
    assert [r["train_id"] for r in data["results"]] == ["KMRL-002"]
    assert data["errors"][0]["train_id"] == "7"
    assert data["errors"][0]["field"] == "train_id"


def test_depot_layout_required_before_moves():
    assert client.get("/api/depot/layout").status_code == 404
    assert client.post("/api/depot/move", json={"train_id": "KMRL-001", "target_bay_id": "A2"}).status_code == 404


def test_depot_layout_and_moves():
    assert client.put("/api/depot/layout", json=_layout_body()).status_code == 200

    moved = client.post("/api/depot/move", json={"train_id": "KMRL-001", "target_bay_id": "A2"})
    assert moved.status_code == 200
    assert moved.json()["success"] is True
    assert moved.json()["previous_bay_id"] == "A1"

    rejected = client.post("/api/depot/move", json={"train_id": "KMRL-005", "target_bay_id": "A2"})
    assert rejected.json()["success"] is False
    assert rejected.json()["reason"] == "bay A2 occupied by KMRL-001"

    bays = {bay["bay_id"]: bay["occupied_by"] for bay in client.get("/api/depot/layout").json()["bays"]}
    assert bays == {"A1": None, "A2": "KMRL-001"}


def test_depot_layout_with_double_booked_train_is_rejected():
    body = _layout_body()
    body["bays"][1]["occupied"] = "KMRL-001"
    assert client.put("/api/depot/layout", json=body).status_code == 422


def test_api_key_is_enforced_when_configured(monkeypatch):
    monkeypatch.setattr(settings, "api_key", "secret")

    assert client.get("/api/depot/layout").status_code == 401
    assert client.get("/api/depot/layout", headers={"X-API-Key": "secret"}).status_code == 404
