from typing import Callable, List, Optional

from refchat.domain.models import SessionSummary
from refchat.infrastructure.logging.logger import logger


DELETE_CONFIRM_PROMPT = "Are you sure you want to delete this chat? This action cannot be undone."


class SessionListController:
    """会话列表：负责拉取摘要、导航（active_id）、新建与删除。

    删除必须经过 confirm 回调确认，拒绝时不会发出任何请求。
    """

    def __init__(self, api):
        self._api = api
        self._summaries: List[SessionSummary] = []
        self.active_id: Optional[str] = None
        self.deleting_id: Optional[str] = None

    @property
    def summaries(self) -> List[SessionSummary]:
        return list(self._summaries)

    def refresh(self) -> List[SessionSummary]:
        self._summaries = self._api.list_sessions()
        return self.summaries

    def select(self, session_id: Optional[str]) -> Optional[str]:
        self.active_id = session_id
        return session_id

    def find(self, session_id: str) -> Optional[SessionSummary]:
        for s in self._summaries:
            if s.session_id == session_id:
                return s
        return None

    def is_active(self, session_id: str) -> bool:
        return self.active_id == session_id

    def create(self) -> str:
        created = self._api.create_chat()
        session_id = created["sessionId"]
        self.select(session_id)
        self.refresh()
        return session_id

    def delete(self, session_id: str, confirm: Callable[[str], bool]) -> bool:
        """确认后删除会话。返回 False 表示用户取消。"""
        if not confirm(DELETE_CONFIRM_PROMPT):
            return False
        self.deleting_id = session_id
        try:
            result = self._api.delete_session(session_id)
            logger.info("Delete result", extra={"extra": {"session_id": session_id, "result": result}})
            if self.is_active(session_id):
                self.select(None)
            self.refresh()
        finally:
            self.deleting_id = None
        return True
