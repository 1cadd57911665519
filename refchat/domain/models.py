"""会话与消息的数据模型。

本模块定义服务端存储与客户端缓存共享的结构：

- Table: 回答附带的表格（列顺序 + 行映射）。
- Message: 一条用户或助手消息。
- Session: 一个持久化的会话线程。
- SessionSummary: 会话列表中的摘要项。
- CannedAnswer: 预置回答语料中的一条记录。

所有结构都通过 to_dict / from_dict 与 JSON 线格式（camelCase 键）互转，
可选字段未设置时不写入。
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, get_args


Role = Literal["user", "assistant"]

DEFAULT_TITLE = "New Chat"


def utcnow_iso() -> str:
    """当前 UTC 时间，ISO-8601 格式并以 Z 结尾。"""

    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class Table:
    columns: List[str]
    rows: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"columns": list(self.columns), "rows": [dict(r) for r in self.rows]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        columns = data.get("columns") or []
        rows = data.get("rows") or []
        if not isinstance(columns, list) or not isinstance(rows, list):
            raise ValueError("table columns/rows must be lists")
        return cls(
            columns=[str(c) for c in columns],
            rows=[dict(r) for r in rows if isinstance(r, dict)],
        )


@dataclass
class Message:
    """一条对话消息。

    - role: "user" 或 "assistant"。
    - text: 纯文本内容。
    - timestamp: ISO-8601 UTC 字符串。
    - table / metadata: 仅助手消息可能携带。
    - answer_id: 助手消息对应的预置回答 id。
    """

    role: Role
    text: str
    timestamp: str = field(default_factory=utcnow_iso)
    table: Optional[Table] = None
    metadata: Optional[Dict[str, Any]] = None
    answer_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"role": self.role, "text": self.text, "timestamp": self.timestamp}
        if self.table is not None:
            data["table"] = self.table.to_dict()
        if self.metadata is not None:
            data["metadata"] = dict(self.metadata)
        if self.answer_id is not None:
            data["answerId"] = self.answer_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        role = data.get("role")
        if role not in get_args(Role):
            raise ValueError(f"unknown message role: {role!r}")
        table = data.get("table")
        return cls(
            role=role,
            text=str(data.get("text") or ""),
            timestamp=str(data.get("timestamp") or utcnow_iso()),
            table=Table.from_dict(table) if isinstance(table, dict) else None,
            metadata=data.get("metadata") if isinstance(data.get("metadata"), dict) else None,
            answer_id=data.get("answerId"),
        )


@dataclass
class SessionSummary:
    session_id: str
    title: str
    last_updated: str

    def to_dict(self) -> Dict[str, Any]:
        return {"sessionId": self.session_id, "title": self.title, "lastUpdated": self.last_updated}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionSummary":
        return cls(
            session_id=data["sessionId"],
            title=data.get("title") or DEFAULT_TITLE,
            last_updated=data.get("lastUpdated") or "",
        )


@dataclass
class Session:
    session_id: str
    title: str
    created_at: str
    last_updated: str
    messages: List[Message] = field(default_factory=list)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            title=self.title,
            last_updated=self.last_updated or self.created_at,
        )

    def touch(self) -> None:
        self.last_updated = utcnow_iso()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "title": self.title,
            "createdAt": self.created_at,
            "lastUpdated": self.last_updated,
            "messages": [m.to_dict() for m in self.messages],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        sid = data["sessionId"]
        if not isinstance(sid, str) or not sid:
            raise ValueError("sessionId must be a non-empty string")
        created = str(data.get("createdAt") or "")
        return cls(
            session_id=sid,
            title=str(data.get("title") or DEFAULT_TITLE),
            created_at=created,
            last_updated=str(data.get("lastUpdated") or created),
            messages=[Message.from_dict(m) for m in (data.get("messages") or [])],
        )


@dataclass(frozen=True)
class CannedAnswer:
    """预置回答语料中的一条记录，按轮转策略选取。"""

    id: str
    answer_text: str
    table: Optional[Table] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_message(self) -> Message:
        return Message(
            role="assistant",
            text=self.answer_text,
            table=Table.from_dict(self.table.to_dict()) if self.table else None,
            metadata=dict(self.metadata),
            answer_id=self.id,
        )
