"""对外 API 服务模块。

把会话存储与回答来源组合成路由层直接调用的操作，
所有返回值都是可直接 JSON 序列化的字典。
"""

import threading
from typing import Any, Dict, List, Optional

from refchat.config.settings import settings
from refchat.domain.exceptions import ValidationError
from refchat.domain.models import DEFAULT_TITLE, Message, Session
from refchat.domain.session_store import SessionStore
from refchat.infrastructure.logging.logger import logger
from refchat.infrastructure.storage.json_store import JsonSessionStore
from refchat.responses import ResponseSource, create_response_source


TITLE_WORD_LIMIT = 6


def generate_title(text: str) -> str:
    """取首条用户消息的前 6 个词作为会话标题，空消息回退到默认标题。"""

    words = (text or "").split()
    return " ".join(words[:TITLE_WORD_LIMIT]) or DEFAULT_TITLE


class ChatService:
    def __init__(self, store: SessionStore, responses: ResponseSource):
        self._store = store
        self._responses = responses

    @property
    def store(self) -> SessionStore:
        return self._store

    def list_sessions(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in self._store.list()]

    def new_chat(self) -> Dict[str, Any]:
        session = self._store.create()
        logger.info("Created new session", extra={"extra": {"session_id": session.session_id}})
        return {
            "sessionId": session.session_id,
            "title": session.title,
            "createdAt": session.created_at,
        }

    def get_session(self, session_id: str) -> Dict[str, Any]:
        return self._store.get(session_id).to_dict()

    def ask(self, session_id: str, question: Any) -> Dict[str, Any]:
        """追加一轮用户提问与预置回答，返回助手消息。

        Args:
            session_id: 会话ID
            question: 用户问题，必须是非空字符串

        Returns:
            助手消息的字典形式（text/table/metadata/timestamp/answerId）

        Raises:
            NotFoundError: 会话不存在（优先于问题校验）
            ValidationError: 问题缺失或不是字符串
        """

        def _exchange(session: Session) -> Message:
            if not question or not isinstance(question, str):
                raise ValidationError(code="INVALID_INPUT", message="Question is required")
            session.messages.append(Message(role="user", text=question))
            if len(session.messages) == 1:
                session.title = generate_title(question)
            answer = self._responses.next(session)
            reply = answer.to_message()
            session.messages.append(reply)
            return reply

        reply = self._store.mutate(session_id, _exchange)
        logger.info(
            "Answered question",
            extra={"extra": {
                "session_id": session_id,
                "answer_id": reply.answer_id,
                "source": self._responses.name,
            }},
        )
        return reply.to_dict()

    def delete_session(self, session_id: str) -> Dict[str, Any]:
        self._store.delete(session_id)
        return {"message": "Session deleted successfully", "sessionId": session_id}


_service: Optional[ChatService] = None
_service_lock = threading.Lock()


def get_default_service() -> ChatService:
    """获取默认的 ChatService 实例（单例）。

    首次并发请求共用同一个实例，保证所有请求走同一把存储锁。
    """
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = ChatService(
                    store=JsonSessionStore(settings.sessions_path),
                    responses=create_response_source(),
                )
    return _service
