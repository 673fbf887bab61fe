import json
import logging
from pathlib import Path

from app.storage.memory import MemoryStore

logger = logging.getLogger("app.storage.json_store")


class JsonFileStore(MemoryStore):
    def __init__(self, path: Path):
        super().__init__()
        self._path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except Exception as exc:
            logger.warning("store load failed, starting empty | path=%s err=%s", self._path, exc)
            return
        if not isinstance(payload, dict):
            return

        users = payload.get("users")
        sessions = payload.get("sessions")
        if isinstance(users, dict):
            self._users = {
                str(key): value
                for key, value in users.items()
                if isinstance(key, str) and isinstance(value, dict)
            }
        if isinstance(sessions, dict):
            self._sessions = {
                str(key): value
                for key, value in sessions.items()
                if isinstance(key, str) and isinstance(value, dict)
            }

    def _changed(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(".tmp")
        temp_path.write_text(
            json.dumps({"users": self._users, "sessions": self._sessions}, ensure_ascii=False),
            encoding="utf-8",
        )
        temp_path.replace(self._path)
