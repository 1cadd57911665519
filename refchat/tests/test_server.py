import pytest
from fastapi.testclient import TestClient

from refchat.api.server import app
from refchat.api.service import ChatService, get_default_service
from refchat.infrastructure.storage.json_store import JsonSessionStore
from refchat.responses.corpus import DEFAULT_CORPUS
from refchat.responses.round_robin import RoundRobinResponseSource


@pytest.fixture
def client(tmp_path):
    service = ChatService(JsonSessionStore(tmp_path / "sessions.json"), RoundRobinResponseSource())
    app.dependency_overrides[get_default_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_list_sessions_seeded(client):
    resp = client.get("/api/sessions")
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 2
    assert set(data[0]) == {"sessionId", "title", "lastUpdated"}


def test_chat_flow(client):
    created = client.get("/api/new-chat").json()
    sid = created["sessionId"]
    resp = client.post(f"/api/chat/{sid}", json={"question": "Show quarterly revenue analysis"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["answerId"] == DEFAULT_CORPUS[0].id
    assert body["text"] == DEFAULT_CORPUS[0].answer_text
    session = client.get(f"/api/session/{sid}").json()
    assert session["title"] == "Show quarterly revenue analysis"
    assert len(session["messages"]) == 2


def test_unknown_session_is_404(client):
    resp = client.get("/api/session/nope")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Session not found"
    resp = client.post("/api/chat/nope", json={"question": "hi"})
    assert resp.status_code == 404


@pytest.mark.parametrize("payload", [{}, {"question": 3}, {"question": ""}])
def test_bad_question_is_400(client, payload):
    sid = client.get("/api/new-chat").json()["sessionId"]
    resp = client.post(f"/api/chat/{sid}", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Question is required"}


def test_malformed_body_is_400(client):
    sid = client.get("/api/new-chat").json()["sessionId"]
    resp = client.post(f"/api/chat/{sid}", content="not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400


def test_delete(client):
    sid = client.get("/api/new-chat").json()["sessionId"]
    resp = client.delete(f"/api/session/{sid}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Session deleted successfully", "sessionId": sid}
    count = len(client.get("/api/sessions").json())
    resp = client.delete(f"/api/session/{sid}")
    assert resp.status_code == 404
    assert resp.json()["requestedId"] == sid
    assert resp.json()["availableCount"] == count


def test_cors_allow_list(client):
    ok = client.options(
        "/api/sessions",
        headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
    )
    assert ok.status_code == 200
    assert ok.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert ok.headers["access-control-allow-credentials"] == "true"
    denied = client.options(
        "/api/sessions",
        headers={"Origin": "https://evil.example", "Access-Control-Request-Method": "GET"},
    )
    assert denied.status_code == 400
    assert "access-control-allow-origin" not in denied.headers


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
