from fastapi.testclient import TestClient

from main import create_app
from src.config.settings import Settings

from conftest import ManualScheduler, ScriptedProvider

RESUME = {"name": "Ada Lovelace", "email": "ada@example.com", "phone": "555-0100"}


def _client(tmp_path, provider=None, offline=True) -> TestClient:
    settings = Settings(
        _env_file=None,
        gemini_api_key="test-key",
        offline_mode=offline,
        state_dir=str(tmp_path / "state"),
        ai_retry_delay_seconds=0,
    )
    app = create_app(settings, provider=provider or ScriptedProvider(), scheduler=ManualScheduler())
    return TestClient(app)


def test_health(tmp_path):
    with _client(tmp_path) as client:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


def test_candidate_registration_and_listing(tmp_path):
    with _client(tmp_path) as client:
        response = client.post("/api/candidates", json={"name": "Ada", "email": "", "phone": "1"})
        assert response.status_code == 400
        assert "email" in response.json()["detail"]

        created = client.post("/api/candidates", json=RESUME)
        assert created.status_code == 201
        candidate_id = created.json()["id"]

        listing = client.get("/api/candidates", params={"search": "ada", "status": "pending"})
        assert [c["id"] for c in listing.json()] == [candidate_id]

        assert client.get(f"/api/candidates/{candidate_id}").json()["name"] == "Ada Lovelace"
        assert client.get("/api/candidates/missing").status_code == 404


def test_interview_lifecycle(tmp_path):
    with _client(tmp_path) as client:
        candidate_id = client.post("/api/candidates", json=RESUME).json()["id"]

        assert client.post("/api/interview/start", json={"candidate_id": "missing"}).status_code == 404

        started = client.post("/api/interview/start", json={"candidate_id": candidate_id})
        assert started.status_code == 200
        body = started.json()
        assert body["state"] == "active"
        assert body["current_question"]["id"] == "fallback_q1"
        assert body["time_remaining_seconds"] == 20

        assert client.post("/api/interview/start", json={"candidate_id": candidate_id}).status_code == 409

        paused = client.post("/api/interview/pause")
        assert paused.json()["state"] == "paused"
        assert client.post("/api/interview/answer", json={"answer_text": "x"}).status_code == 409
        assert client.post("/api/interview/resume").json()["state"] == "active"

        answer = client.post("/api/interview/answer", json={"answer_text": "", "time_spent_seconds": 5})
        assert answer.status_code == 200
        assert answer.json()["score"] == 65
        assert client.get("/api/interview").json()["awaiting_next_question"] is True

        completed = client.post("/api/interview/complete")
        assert completed.status_code == 200
        assert completed.json()["status"] == "completed"
        assert completed.json()["score"] == 65

        cleared = client.delete("/api/interview")
        assert cleared.json()["state"] == "uninitialized"

        restarted = client.post("/api/interview/start", json={"candidate_id": candidate_id})
        assert restarted.status_code == 409


def test_ai_status_reports_auth_failure(tmp_path):
    provider = ScriptedProvider(RuntimeError("400 INVALID_ARGUMENT API_KEY_INVALID"))
    with _client(tmp_path, provider=provider, offline=False) as client:
        response = client.get("/api/ai/status")
        assert response.status_code == 503
        assert provider.calls == 1


def test_ai_status_available(tmp_path):
    provider = ScriptedProvider("pong")
    with _client(tmp_path, provider=provider, offline=False) as client:
        body = client.get("/api/ai/status").json()
        assert body["available"] is True
        assert body["model"] == "models/test-model"


def test_state_restored_on_restart(tmp_path):
    with _client(tmp_path) as client:
        candidate_id = client.post("/api/candidates", json=RESUME).json()["id"]
        client.post("/api/interview/start", json={"candidate_id": candidate_id})
        client.post("/api/interview/tick", json={"time_remaining_seconds": 9})
        client.post("/api/interview/pause")

    with _client(tmp_path) as client:
        body = client.get("/api/interview").json()
        assert body["state"] == "paused"
        assert body["candidate_id"] == candidate_id
        assert body["time_remaining_seconds"] == 9
        assert body["has_incomplete_session"] is True
