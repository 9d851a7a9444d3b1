from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import build_advisory_service, gemini_body
from medagent.api.dependencies import get_advisory_service, get_session_service
from medagent.config.prompts import FALLBACK_ADVICE, SERVICE_UNAVAILABLE_NOTICE
from medagent.main import app
from medagent.models.triage import RiskCategory
from medagent.services.session_service import SessionService

INTAKE = {"name": "Alex", "age": 30, "symptoms": ["fever", "headache"]}


def _install(advisory_service) -> TestClient:
    sessions = SessionService(advisory_service=advisory_service, auto_advance_seconds=0)
    app.dependency_overrides[get_advisory_service] = lambda: advisory_service
    app.dependency_overrides[get_session_service] = lambda: sessions
    return TestClient(app)


@pytest.fixture
def client():
    service = build_advisory_service(lambda r: httpx.Response(200, json=gemini_body("Stay hydrated.")))
    with _install(service) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out")

    service = build_advisory_service(handler)
    with _install(service) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_symptom_catalog(client: TestClient) -> None:
    body = client.get("/api/v1/assessment/symptoms").json()
    names = [s["name"] for s in body["symptoms"]]
    assert len(names) == 8
    assert "shortness_breath" in names
    assert body["age_min"] <= body["age_max"]


def test_classify_returns_risk_and_guidance(client: TestClient) -> None:
    response = client.post("/api/v1/assessment/classify", json=INTAKE)
    assert response.status_code == 200
    body = response.json()
    assert body["risk"] == "MODERATE"
    assert body["guidance"]["color"] == "yellow"
    assert body["patient"]["symptom_summary"] == "Fever, Headache"


def test_classify_rejects_missing_name(client: TestClient) -> None:
    response = client.post("/api/v1/assessment/classify", json={**INTAKE, "name": "  "})
    assert response.status_code == 422
    assert response.json()["detail"] == {"field": "name", "message": "Please enter your name"}


def test_classify_rejects_empty_selection(client: TestClient) -> None:
    response = client.post("/api/v1/assessment/classify", json={**INTAKE, "symptoms": []})
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "symptoms"


@pytest.mark.parametrize("age", [30.5, [30], "3_0", "12.5"])
def test_classify_rejects_non_integer_age(client: TestClient, age) -> None:
    response = client.post("/api/v1/assessment/classify", json={**INTAKE, "age": age})
    assert response.status_code == 422
    detail = response.json()["detail"]
    assert isinstance(detail, dict)
    assert detail["field"] == "age"
    assert "between" in detail["message"]


def test_classify_accepts_whole_float_age(client: TestClient) -> None:
    response = client.post("/api/v1/assessment/classify", json={**INTAKE, "age": 30.0})
    assert response.status_code == 200
    assert response.json()["patient"]["age"] == 30


def test_relay_success(client: TestClient) -> None:
    response = client.post("/api/v1/assessment/advisory", json=INTAKE)
    assert response.status_code == 200
    body = response.json()
    assert body["risk"] == "MODERATE"
    assert body["advisory"]["text"] == "Stay hydrated."
    assert body["advisory"]["origin"] == "generated"
    assert body["advisory"]["notice"] is None
    assert body["advisory"]["disclaimer"]


def test_relay_failure_returns_fallback(failing_client: TestClient) -> None:
    payload = {"name": "Sam", "age": "45", "symptoms": ["shortness_breath"]}
    response = failing_client.post("/api/v1/assessment/advisory", json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["risk"] == "HIGH"
    assert body["advisory"]["origin"] == "fallback"
    assert body["advisory"]["text"] == FALLBACK_ADVICE[RiskCategory.HIGH]
    assert body["advisory"]["notice"] == SERVICE_UNAVAILABLE_NOTICE


def test_session_wizard_flow(client: TestClient) -> None:
    created = client.post("/api/v1/assessment/sessions")
    assert created.status_code == 201
    session_id = created.json()["session_id"]
    assert created.json()["stage"] == "intake"

    submitted = client.post(f"/api/v1/assessment/sessions/{session_id}/intake", json=INTAKE)
    assert submitted.status_code == 200
    assert submitted.json()["stage"] == "risk"
    assert submitted.json()["risk"] == "MODERATE"
    assert submitted.json()["advisory_status"] == "idle"

    advanced = client.post(f"/api/v1/assessment/sessions/{session_id}/continue", params={"wait": True})
    body = advanced.json()
    assert body["stage"] == "consultation"
    assert body["advisory_status"] == "resolved"
    assert body["advisory"]["text"] == "Stay hydrated."

    refreshed = client.post(
        f"/api/v1/assessment/sessions/{session_id}/advisory/refresh", params={"wait": True}
    )
    assert refreshed.json()["advisory_status"] == "resolved"

    restarted = client.post(f"/api/v1/assessment/sessions/{session_id}/restart")
    assert restarted.json()["stage"] == "intake"
    assert restarted.json()["patient"] is None

    assert client.delete(f"/api/v1/assessment/sessions/{session_id}").status_code == 204
    assert client.get(f"/api/v1/assessment/sessions/{session_id}").status_code == 404


def test_session_invalid_intake_keeps_stage(client: TestClient) -> None:
    session_id = client.post("/api/v1/assessment/sessions").json()["session_id"]
    response = client.post(
        f"/api/v1/assessment/sessions/{session_id}/intake", json={**INTAKE, "age": 150}
    )
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "age"
    assert client.get(f"/api/v1/assessment/sessions/{session_id}").json()["stage"] == "intake"


def test_continue_before_intake_conflicts(client: TestClient) -> None:
    session_id = client.post("/api/v1/assessment/sessions").json()["session_id"]
    response = client.post(f"/api/v1/assessment/sessions/{session_id}/continue")
    assert response.status_code == 409


def test_unknown_session_is_404(client: TestClient) -> None:
    assert client.get("/api/v1/assessment/sessions/nope").status_code == 404
    assert client.post("/api/v1/assessment/sessions/nope/continue").status_code == 404
    assert client.post("/api/v1/assessment/sessions/nope/intake", json=INTAKE).status_code == 404
