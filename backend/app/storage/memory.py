import copy
from threading import Lock
from typing import Any

from app.storage.base import Store


class MemoryStore(Store):
    def __init__(self):
        self._lock = Lock()
        self._users: dict[str, dict[str, Any]] = {}
        self._sessions: dict[str, dict[str, Any]] = {}

    def _changed(self) -> None:
        """Hook for subclasses; called with the lock held after every write."""

    def create_user(self, record: dict[str, Any]) -> dict[str, Any]:
        user_id = str(record.get("id") or "").strip()
        email = str(record.get("email") or "").strip().lower()
        if not user_id or not email:
            raise ValueError("user id and email are required")

        with self._lock:
            if user_id in self._users:
                raise FileExistsError("User already exists")
            if any(str(item.get("email") or "") == email for item in self._users.values()):
                raise FileExistsError("Email already registered")
            stored = copy.deepcopy(dict(record))
            stored["email"] = email
            self._users[user_id] = stored
            self._changed()
            return copy.deepcopy(stored)

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        with self._lock:
            item = self._users.get(str(user_id or ""))
            return copy.deepcopy(item) if item else None

    def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        needle = str(email or "").strip().lower()
        if not needle:
            return None
        with self._lock:
            for item in self._users.values():
                if str(item.get("email") or "") == needle:
                    return copy.deepcopy(item)
        return None

    def save_session(self, record: dict[str, Any]) -> dict[str, Any]:
        session_id = str(record.get("id") or "").strip()
        if not session_id:
            raise ValueError("session id is required")
        with self._lock:
            stored = copy.deepcopy(dict(record))
            self._sessions[session_id] = stored
            self._changed()
            return copy.deepcopy(stored)

    def get_session(self, session_id: str) -> dict[str, Any] | None:
        with self._lock:
            item = self._sessions.get(str(session_id or ""))
            return copy.deepcopy(item) if item else None

    def list_user_sessions(self, user_id: str, limit: int = 50) -> list[dict[str, Any]]:
        uid = str(user_id or "").strip()
        if not uid:
            return []
        capped = max(1, min(int(limit or 50), 200))

        with self._lock:
            rows = [
                copy.deepcopy(item)
                for item in self._sessions.values()
                if str(item.get("user_id") or "") == uid
            ]

        rows.sort(key=lambda item: float(item.get("created_at") or 0.0))
        return rows[-capped:]

    def delete_session(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(str(session_id or ""), None) is not None
            if removed:
                self._changed()
            return removed

    def clear(self) -> None:
        with self._lock:
            self._users.clear()
            self._sessions.clear()
            self._changed()
