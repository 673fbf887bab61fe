from abc import ABC, abstractmethod
from typing import Any


class Store(ABC):
    """CRUD surface the practice service depends on. Records are plain dicts."""

    @abstractmethod
    def create_user(self, record: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    def get_user(self, user_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    def save_session(self, record: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    def get_session(self, session_id: str) -> dict[str, Any] | None:
        ...

    @abstractmethod
    def list_user_sessions(self, user_id: str, limit: int = 50) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    def delete_session(self, session_id: str) -> bool:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...
