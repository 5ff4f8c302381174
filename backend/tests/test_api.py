import pytest
from fastapi.testclient import TestClient

from app.analysis.mock import MockCompletionAdapter
from app.analysis.orchestrator import AnalysisOrchestrator
from app.api import analysis as analysis_api
from app.main import app


QUALITY_BODY = {"code": "function f(){return 1}", "language": "javascript"}


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(analysis_api, "orchestrator", AnalysisOrchestrator(adapter=MockCompletionAdapter()))
    with TestClient(app) as test_client:
        yield test_client


def test_list_stages_starts_empty(client):
    response = client.get("/api/analysis")

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {"quality", "plagiarism", "feedback", "recruiter_report"}
    assert all(item["result"] is None and item["in_flight"] is False for item in body.values())


def test_unknown_stage_is_404(client):
    assert client.get("/api/analysis/astrology").status_code == 404
    assert client.post("/api/analysis/astrology", json={}).status_code == 404


def test_dependent_stage_before_quality_is_409(client):
    response = client.post("/api/analysis/recruiter_report", json={"candidate_name": "Ada"})

    assert response.status_code == 409
    assert "quality" in response.json()["detail"]


def test_invalid_tone_is_422(client):
    response = client.post("/api/analysis/feedback", json={"tone": "sarcastic"})

    assert response.status_code == 422


def test_trigger_and_wait_returns_result_without_raw_text(client):
    response = client.post("/api/analysis/quality?wait=true", json=QUALITY_BODY)

    assert response.status_code == 202
    body = response.json()
    assert body["stage"] == "quality"
    assert body["in_flight"] is False
    assert body["result"]["score"] == 78
    assert body["badge"] == "hire"
    assert "raw_response" not in body["result"]


def test_full_flow_and_exports(client):
    assert client.post("/api/analysis/quality?wait=true", json=QUALITY_BODY).status_code == 202
    assert client.post("/api/analysis/plagiarism?wait=true", json=QUALITY_BODY).status_code == 202

    feedback = client.post(
        "/api/analysis/feedback?wait=true",
        json={"candidate_name": "Ada", "tone": "encouraging", "hiring_decision": "offer", "include_plagiarism": True},
    )
    report = client.post("/api/analysis/recruiter_report?wait=true", json={"candidate_name": "Ada"})

    assert feedback.json()["result"]["subject"]
    assert report.json()["result"]["technical_score"] == 78

    email = client.get("/api/analysis/feedback/email")
    assert email.status_code == 200
    assert email.text.startswith("Subject: ")

    export = client.get("/api/analysis/recruiter_report/export")
    assert export.status_code == 200
    assert "Candidate: Ada" in export.text


def test_exports_404_before_generation(client):
    assert client.get("/api/analysis/feedback/email").status_code == 404
    assert client.get("/api/analysis/recruiter_report/export").status_code == 404


def test_reset_clears_results(client):
    client.post("/api/analysis/quality?wait=true", json=QUALITY_BODY)

    assert client.delete("/api/analysis").status_code == 200
    assert client.get("/api/analysis/quality").json()["result"] is None


def test_websocket_pushes_snapshot_and_stage_updates(client):
    with client.websocket_connect("/api/analysis/ws") as websocket:
        snapshot = websocket.receive_json()
        assert snapshot["type"] == "snapshot"
        assert snapshot["stages"]["quality"]["result"] is None

        client.post("/api/analysis/quality?wait=true", json=QUALITY_BODY)

        running = websocket.receive_json()
        finished = websocket.receive_json()

    assert running["type"] == "stage_update"
    assert running["stage"] == "quality"
    assert running["in_flight"] is True
    assert finished["in_flight"] is False
    assert finished["result"]["score"] == 78
