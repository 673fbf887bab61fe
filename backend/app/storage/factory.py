from pathlib import Path

from app.storage.base import Store
from app.storage.json_store import JsonFileStore
from app.storage.memory import MemoryStore


def build_store(backend: str, path: Path | None = None) -> Store:
    normalized = str(backend or "memory").strip().lower()
    if normalized == "memory":
        return MemoryStore()
    if normalized == "json":
        if path is None:
            raise ValueError("json storage requires a path")
        return JsonFileStore(path)
    raise ValueError(f"Unknown storage backend: {backend}")
