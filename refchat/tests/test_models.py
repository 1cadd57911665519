import pytest

from refchat.config.settings import Settings
from refchat.domain.models import Message, Session, Table


def test_message_omits_unset_optionals():
    m = Message(role="user", text="hi", timestamp="t")
    assert m.to_dict() == {"role": "user", "text": "hi", "timestamp": "t"}


def test_message_rejects_unknown_role():
    with pytest.raises(ValueError):
        Message.from_dict({"role": "system", "text": "x"})


def test_session_from_dict_and_summary():
    s = Session.from_dict({
        "sessionId": "s1",
        "title": "T",
        "createdAt": "2026-01-01T00:00:00Z",
        "messages": [{"role": "assistant", "text": "a", "answerId": "answer-001",
                      "table": {"columns": ["c"], "rows": [{"c": 1}]}}],
    })
    assert s.last_updated == "2026-01-01T00:00:00Z"
    assert s.messages[0].table == Table(columns=["c"], rows=[{"c": 1}])
    assert s.summary().to_dict() == {"sessionId": "s1", "title": "T", "lastUpdated": "2026-01-01T00:00:00Z"}


def test_settings_sources(monkeypatch, tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("storage_root: data\nresponse_source: round_robin\n", encoding="utf-8")
    monkeypatch.setenv("REFCHAT_CONFIG_FILE", str(cfg))
    monkeypatch.setenv("PORT", "6001")
    s = Settings()
    assert s.port == 6001
    assert s.sessions_path.as_posix() == "data/sessions.json"
    assert Settings(sessions_file=str(tmp_path / "x.json")).sessions_path == tmp_path / "x.json"
