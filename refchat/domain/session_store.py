from typing import Callable, List, Protocol, TypeVar

from .models import Message, Session, SessionSummary


T = TypeVar("T")


class SessionStore(Protocol):
    def load(self) -> None:
        ...

    def save(self) -> bool:
        ...

    def list(self) -> List[SessionSummary]:
        ...

    def get(self, session_id: str) -> Session:
        ...

    def create(self) -> Session:
        ...

    def append_message(self, session_id: str, message: Message) -> Session:
        ...

    def mutate(self, session_id: str, fn: Callable[[Session], T]) -> T:
        ...

    def delete(self, session_id: str) -> None:
        ...
