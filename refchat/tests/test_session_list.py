from refchat.client.session_list import DELETE_CONFIRM_PROMPT, SessionListController
from refchat.domain.models import SessionSummary


class FakeApi:
    def __init__(self):
        self.items = [SessionSummary("s1", "First", "t1"), SessionSummary("s2", "Second", "t2")]
        self.deleted = []
        self.list_calls = 0

    def list_sessions(self):
        self.list_calls += 1
        return list(self.items)

    def create_chat(self):
        self.items.append(SessionSummary("s3", "New Chat", "t3"))
        return {"sessionId": "s3", "title": "New Chat", "createdAt": "t3"}

    def delete_session(self, session_id):
        self.deleted.append(session_id)
        self.items = [s for s in self.items if s.session_id != session_id]
        return {"message": "Session deleted successfully", "sessionId": session_id}


def test_refresh_and_select():
    ctl = SessionListController(FakeApi())
    assert [s.title for s in ctl.refresh()] == ["First", "Second"]
    ctl.select("s2")
    assert ctl.is_active("s2")
    assert ctl.find("s1").title == "First"


def test_create_selects_and_refreshes():
    api = FakeApi()
    ctl = SessionListController(api)
    assert ctl.create() == "s3"
    assert ctl.active_id == "s3"
    assert api.list_calls == 1
    assert ctl.find("s3") is not None


def test_delete_declined_issues_no_request():
    api = FakeApi()
    ctl = SessionListController(api)
    prompts = []

    def confirm(prompt):
        prompts.append(prompt)
        return False

    assert ctl.delete("s1", confirm) is False
    assert prompts == [DELETE_CONFIRM_PROMPT]
    assert api.deleted == []


def test_delete_active_session_clears_selection():
    api = FakeApi()
    ctl = SessionListController(api)
    ctl.refresh()
    ctl.select("s1")
    assert ctl.delete("s1", lambda _: True) is True
    assert api.deleted == ["s1"]
    assert ctl.active_id is None
    assert [s.session_id for s in ctl.summaries] == ["s2"]
    assert ctl.deleting_id is None
