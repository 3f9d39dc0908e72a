from __future__ import annotations

from fastapi.testclient import TestClient

from projection_app.main import app
from projection_app.models.rent import RentModel
from projection_app.sample_data import build_sample_projection

client = TestClient(app)


def sample_payload(rent_model: RentModel = RentModel.FIXED_ESCALATION) -> dict:
    return build_sample_projection(rent_model).model_dump(mode="json")


def test_healthcheck():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_sample_endpoint_returns_a_projection_input():
    response = client.get("/projections/sample", params={"rent_model": "REVENUE_SHARE"})
    assert response.status_code == 200
    body = response.json()
    assert body["rent_plan"]["rent_model"] == "REVENUE_SHARE"
    assert {plan["curriculum_type"] for plan in body["curriculum_plans"]} == {"FR", "IB"}


def test_run_projection():
    response = client.post("/projections/run", json={"projection": sample_payload()})
    assert response.status_code == 200
    result = response.json()["result"]
    assert len(result["years"]) == 30
    assert result["years"][0]["year"] == 2023
    assert result["years"][-1]["year"] == 2052
    assert float(result["summary"]["npv_cash_flow"]) != 0


def test_missing_rent_plan_is_unprocessable():
    payload = sample_payload()
    payload["rent_plan"] = None
    response = client.post("/projections/run", json={"projection": payload})
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "MISSING_RENT_PLAN"


def test_business_rule_violation_is_a_bad_request():
    payload = sample_payload()
    payload["curriculum_plans"][0]["cpi_frequency"] = 4
    response = client.post("/projections/run", json={"projection": payload})
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["code"] == "INVALID_FREQUENCY"
    assert detail["field"] == "frequency"


def test_compare_projections():
    response = client.post(
        "/projections/compare",
        json={
            "projections": [
                {"name": "fixed", "projection": sample_payload()},
                {"name": "partner", "projection": sample_payload(RentModel.PARTNER_MODEL)},
            ]
        },
    )
    assert response.status_code == 200
    comparisons = response.json()["comparisons"]
    assert [item["name"] for item in comparisons] == ["fixed", "partner"]


def test_compare_reports_which_projection_failed():
    broken = sample_payload()
    broken["rent_plan"] = None
    response = client.post(
        "/projections/compare",
        json={"projections": [{"name": "ok", "projection": sample_payload()}, {"name": "broken", "projection": broken}]},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["details"]["projection"] == "broken"


def test_compare_rejects_duplicate_names():
    response = client.post(
        "/projections/compare",
        json={
            "projections": [
                {"name": "same", "projection": sample_payload()},
                {"name": "same", "projection": sample_payload()},
            ]
        },
    )
    assert response.status_code == 422
