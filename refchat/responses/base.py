"""回答来源抽象接口。

上层 ChatService 不关心回答如何产生，只依赖此协议：

- 每种选择策略实现一个 ResponseSource（如 RoundRobinResponseSource）。
- next(session) 在用户消息已追加之后调用，返回本轮要回复的 CannedAnswer。

这样可以在不改存储与路由代码的前提下替换回答策略。
"""

from typing import Protocol

from refchat.domain.models import CannedAnswer, Session


class ResponseSource(Protocol):
    """回答来源协议。

    - name: 策略名称，用于日志。
    - next(session): 为当前会话选出下一条回答。
    """

    name: str

    def next(self, session: Session) -> CannedAnswer:
        ...
