from typing import Sequence, Tuple

from refchat.domain.exceptions import ValidationError
from refchat.domain.models import CannedAnswer, Session
from refchat.responses.corpus import DEFAULT_CORPUS


class RoundRobinResponseSource:
    """按会话消息数轮转选取回答，每个用户回合一条，到末尾后回绕。

    index = (消息数 - 1) // 2 % 语料长度，其中消息数已包含本轮用户消息。
    无随机性，同一会话状态总是得到同一回答。
    """

    name = "round_robin"

    def __init__(self, corpus: Sequence[CannedAnswer] = DEFAULT_CORPUS):
        if not corpus:
            raise ValidationError(code="EMPTY_CORPUS", message="response corpus is empty")
        self._corpus: Tuple[CannedAnswer, ...] = tuple(corpus)

    @property
    def corpus(self) -> Tuple[CannedAnswer, ...]:
        return self._corpus

    def index_for(self, message_count: int) -> int:
        return max(message_count - 1, 0) // 2 % len(self._corpus)

    def next(self, session: Session) -> CannedAnswer:
        return self._corpus[self.index_for(len(session.messages))]
