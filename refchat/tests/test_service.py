import threading

import pytest

from refchat.api import service as service_module
from refchat.api.service import ChatService, generate_title
from refchat.domain.exceptions import NotFoundError, ValidationError
from refchat.infrastructure.storage.json_store import JsonSessionStore
from refchat.responses.corpus import DEFAULT_CORPUS
from refchat.responses.round_robin import RoundRobinResponseSource


def _service(tmp_path) -> ChatService:
    return ChatService(JsonSessionStore(tmp_path / "sessions.json"), RoundRobinResponseSource())


def test_generate_title():
    assert generate_title("Show quarterly revenue analysis now please") == "Show quarterly revenue analysis now please"
    assert generate_title("  one two   three four five six seven eight ") == "one two three four five six"
    assert generate_title("   ") == "New Chat"
    assert generate_title("") == "New Chat"


def test_new_chat_shape(tmp_path):
    svc = _service(tmp_path)
    created = svc.new_chat()
    assert set(created) == {"sessionId", "title", "createdAt"}
    assert created["title"] == "New Chat"
    assert svc.get_session(created["sessionId"])["messages"] == []


def test_ask_appends_exchange_and_titles_once(tmp_path):
    svc = _service(tmp_path)
    sid = svc.new_chat()["sessionId"]
    reply = svc.ask(sid, "Show quarterly revenue analysis for all companies please")
    assert reply["role"] == "assistant"
    assert reply["answerId"] == DEFAULT_CORPUS[0].id
    assert reply["table"]["columns"][0] == "Company"
    svc.ask(sid, "something else entirely")
    session = svc.get_session(sid)
    assert session["title"] == "Show quarterly revenue analysis for all"
    assert [m["role"] for m in session["messages"]] == ["user", "assistant", "user", "assistant"]


def test_ask_rotates_through_corpus(tmp_path):
    svc = _service(tmp_path)
    sid = svc.new_chat()["sessionId"]
    size = len(DEFAULT_CORPUS)
    ids = [svc.ask(sid, f"question {n}")["answerId"] for n in range(size + 1)]
    assert ids[:size] == [a.id for a in DEFAULT_CORPUS]
    assert ids[size] == DEFAULT_CORPUS[0].id


def test_ask_unknown_session_before_validation(tmp_path):
    svc = _service(tmp_path)
    with pytest.raises(NotFoundError):
        svc.ask("missing", None)


@pytest.mark.parametrize("question", [None, "", 42, ["q"]])
def test_ask_invalid_question_leaves_session(tmp_path, question):
    svc = _service(tmp_path)
    sid = svc.new_chat()["sessionId"]
    with pytest.raises(ValidationError) as exc:
        svc.ask(sid, question)
    assert exc.value.http_status == 400
    assert svc.get_session(sid)["messages"] == []


def test_delete_session(tmp_path):
    svc = _service(tmp_path)
    sid = svc.new_chat()["sessionId"]
    assert svc.delete_session(sid) == {"message": "Session deleted successfully", "sessionId": sid}
    assert sid not in {s["sessionId"] for s in svc.list_sessions()}


def test_default_service_is_shared_across_threads(monkeypatch, tmp_path):
    monkeypatch.setattr(service_module, "_service", None)
    monkeypatch.setattr(service_module.settings, "storage_root", str(tmp_path))
    monkeypatch.setattr(service_module.settings, "sessions_file", "sessions.json")
    barrier = threading.Barrier(8)
    seen = []

    def worker():
        barrier.wait()
        seen.append(service_module.get_default_service())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(seen) == 8
    assert all(s is seen[0] for s in seen)
    assert seen[0].store.path == (tmp_path / "sessions.json").resolve()
