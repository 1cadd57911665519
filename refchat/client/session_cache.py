r"""客户端当前会话的消息缓存。

发送流程是一个显式的状态机，每条在途消息对应一个 PendingSend：

    idle --begin_send--> pending --complete--> committed
                                 \--fail-----> rolled_back

- pending: 用户消息已乐观地追加到列表，等待服务端确认。
- committed: 服务端返回助手消息，追加到列表。
- rolled_back: 请求失败，撤回那条乐观追加的用户消息，列表回到发送前状态。

切换或关闭会话会递增 generation；旧 generation 的回包只更新自身状态，
不会写入当前会话的消息列表。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from refchat.domain.exceptions import ApiError, BusinessError, ValidationError
from refchat.domain.models import Message, utcnow_iso
from refchat.infrastructure.logging.logger import logger


class SendState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


_TRANSITIONS = {
    SendState.IDLE: {SendState.PENDING},
    SendState.PENDING: {SendState.COMMITTED, SendState.ROLLED_BACK},
    SendState.COMMITTED: set(),
    SendState.ROLLED_BACK: set(),
}


@dataclass
class PendingSend:
    session_id: str
    user_message: Message
    generation: int
    state: SendState = SendState.IDLE
    reply: Optional[Message] = None
    error: Optional[Exception] = field(default=None, repr=False)

    def transition(self, target: SendState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise ValidationError(
                code="INVALID_STATE",
                message=f"cannot move send from {self.state.value} to {target.value}",
            )
        self.state = target


def normalize_reply(data: Dict[str, Any]) -> Message:
    """把服务端返回的助手消息整理为 Message，兼容旧字段名。"""

    return Message.from_dict({
        "role": "assistant",
        "text": data.get("text") or data.get("answerText") or data.get("answer") or "",
        "table": data.get("table"),
        "metadata": data.get("metadata"),
        "timestamp": data.get("timestamp") or utcnow_iso(),
        "answerId": data.get("answerId") or data.get("id"),
    })


class SessionCache:
    def __init__(self, api):
        self._api = api
        self._session_id: Optional[str] = None
        self._messages: List[Message] = []
        self._pending: Optional[PendingSend] = None
        self._generation = 0

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def messages(self) -> List[Message]:
        return list(self._messages)

    @property
    def pending(self) -> Optional[PendingSend]:
        return self._pending

    @property
    def sending(self) -> bool:
        return self._pending is not None and self._pending.state is SendState.PENDING

    def open(self, session_id: Optional[str]) -> List[Message]:
        """切换到指定会话并加载其消息；加载失败时列表为空并抛出原异常。"""
        self._generation += 1
        self._pending = None
        self._session_id = session_id
        self._messages = []
        if not session_id:
            return []
        try:
            session = self._api.get_session(session_id)
        except BusinessError as e:
            logger.error("Failed to load session", extra={"extra": {"session_id": session_id, "error": e.message}})
            raise
        self._messages = list(session.messages)
        return self.messages

    def close(self) -> None:
        self._generation += 1
        self._pending = None
        self._session_id = None
        self._messages = []

    def begin_send(self, question: str) -> PendingSend:
        if not self._session_id:
            raise ValidationError(code="INVALID_STATE", message="no session is open")
        if self.sending:
            raise ValidationError(code="INVALID_STATE", message="a message is already being sent")
        text = (question or "").strip()
        if not text:
            raise ValidationError(code="INVALID_INPUT", message="Question is required")
        pending = PendingSend(
            session_id=self._session_id,
            user_message=Message(role="user", text=text),
            generation=self._generation,
        )
        pending.transition(SendState.PENDING)
        self._messages.append(pending.user_message)
        self._pending = pending
        return pending

    def complete(self, pending: PendingSend, reply: Dict[str, Any] | Message) -> bool:
        """确认发送成功。返回 False 表示回包已过期，未写入当前列表。

        回包无法解析时抛出 ApiError，此时 pending 仍处于 pending 状态，
        调用方应接着调用 fail 回滚。
        """
        if isinstance(reply, Message):
            message = reply
        elif isinstance(reply, dict):
            try:
                message = normalize_reply(reply)
            except (TypeError, ValueError) as e:
                raise ApiError(code="INVALID_REPLY", message=f"malformed assistant reply: {e}")
        else:
            raise ApiError(code="INVALID_REPLY", message="assistant reply is not a JSON object")
        pending.transition(SendState.COMMITTED)
        pending.reply = message
        if not self._is_current(pending):
            return False
        self._messages.append(message)
        self._pending = None
        return True

    def fail(self, pending: PendingSend, error: Exception) -> bool:
        """发送失败，撤回乐观追加的用户消息。"""
        pending.transition(SendState.ROLLED_BACK)
        pending.error = error
        if not self._is_current(pending):
            return False
        for i, m in enumerate(self._messages):
            if m is pending.user_message:
                del self._messages[i]
                break
        self._pending = None
        return True

    def send(self, question: str) -> PendingSend:
        pending = self.begin_send(question)
        try:
            reply = self._api.ask(pending.session_id, pending.user_message.text)
            self.complete(pending, reply)
        except Exception as e:
            logger.error(
                "Failed to send message",
                extra={"extra": {"session_id": pending.session_id, "error": getattr(e, "message", str(e))}},
            )
            if pending.state is SendState.PENDING:
                self.fail(pending, e)
            raise
        return pending

    def _is_current(self, pending: PendingSend) -> bool:
        return pending.generation == self._generation and self._pending is pending
