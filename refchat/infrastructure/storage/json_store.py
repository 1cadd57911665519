import json
import threading
from pathlib import Path
from typing import Callable, List, Optional, TypeVar
from uuid import uuid4

from refchat.config.settings import settings
from refchat.domain.exceptions import NotFoundError, StoreIOError
from refchat.domain.models import DEFAULT_TITLE, Message, Session, SessionSummary, utcnow_iso
from refchat.domain.session_store import SessionStore
from refchat.infrastructure.logging.logger import logger
from refchat.responses.corpus import seed_sessions


T = TypeVar("T")


class JsonSessionStore(SessionStore):
    """把全部会话保存在单个 JSON 数组文件中。

    每个操作都在实例锁内完成 “从磁盘重新加载 → 修改 → 整体写回”，
    同一实例上的并发请求不会互相覆盖。多个实例共享同一文件时仍是
    后写者覆盖先写者。
    """

    def __init__(self, path: str | Path | None = None):
        self._path = Path(path or settings.sessions_path).resolve()
        self._lock = threading.RLock()
        self._sessions: List[Session] = []

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """从文件加载会话；文件缺失或损坏时回退到种子数据并立即写回。"""
        with self._lock:
            if not self._path.exists():
                logger.info("Sessions file not found, using initial sessions", extra={"extra": {"path": str(self._path)}})
                self._reset()
                return
            try:
                self._sessions = self._read()
            except StoreIOError as e:
                logger.error(
                    "Error loading sessions, using initial sessions",
                    extra={"extra": {"path": str(self._path), "code": e.code, "error": e.message}},
                )
                self._reset()
                return
            logger.info(f"Loaded {len(self._sessions)} sessions from file")

    def save(self) -> bool:
        with self._lock:
            payload = [s.to_dict() for s in self._sessions]
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                self._path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            except OSError as e:
                logger.error("Error saving sessions", extra={"extra": {"path": str(self._path), "error": str(e)}})
                return False
            return True

    def list(self) -> List[SessionSummary]:
        with self._lock:
            self.load()
            return [s.summary() for s in self._sessions]

    def get(self, session_id: str) -> Session:
        with self._lock:
            self.load()
            return self._require(session_id)

    def create(self) -> Session:
        with self._lock:
            self.load()
            now = utcnow_iso()
            session = Session(
                session_id=str(uuid4()),
                title=DEFAULT_TITLE,
                created_at=now,
                last_updated=now,
                messages=[],
            )
            self._sessions.append(session)
            self.save()
            return session

    def append_message(self, session_id: str, message: Message) -> Session:
        def _append(session: Session) -> Session:
            session.messages.append(message)
            return session

        return self.mutate(session_id, _append)

    def mutate(self, session_id: str, fn: Callable[[Session], T]) -> T:
        """定位会话并在锁内执行 fn，随后更新 lastUpdated 并写回。

        fn 抛出的异常会原样传出，此时不会写回文件。
        """
        with self._lock:
            self.load()
            session = self._require(session_id)
            result = fn(session)
            session.touch()
            self.save()
            return result

    def delete(self, session_id: str) -> None:
        with self._lock:
            self.load()
            index = self._index_of(session_id)
            if index is None:
                logger.info(
                    "Session not found for delete",
                    extra={"extra": {"session_id": session_id, "available": len(self._sessions)}},
                )
                raise NotFoundError(requestedId=session_id, availableCount=len(self._sessions))
            self._sessions.pop(index)
            self.save()
            logger.info(
                "Session deleted",
                extra={"extra": {"session_id": session_id, "remaining": len(self._sessions)}},
            )

    def _read(self) -> List[Session]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StoreIOError(code="STORE_READ_ERROR", message=str(e))
        if not isinstance(data, list):
            raise StoreIOError(code="STORE_READ_ERROR", message="Sessions file does not contain an array")
        try:
            return [Session.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreIOError(code="STORE_READ_ERROR", message=f"malformed session record: {e}")

    def _reset(self) -> None:
        self._sessions = seed_sessions()
        self.save()

    def _index_of(self, session_id: str) -> Optional[int]:
        for i, s in enumerate(self._sessions):
            if s.session_id == session_id:
                return i
        return None

    def _require(self, session_id: str) -> Session:
        index = self._index_of(session_id)
        if index is None:
            raise NotFoundError(requestedId=session_id)
        return self._sessions[index]
