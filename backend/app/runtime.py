from app.interview.engine import PracticeEngine
from app.storage.base import Store
from app.storage.factory import build_store
from core.config import STORAGE_BACKEND, STORAGE_PATH

store: Store = build_store(STORAGE_BACKEND, STORAGE_PATH)
practice_engine = PracticeEngine(store)


def get_store() -> Store:
    return store


def get_practice_engine() -> PracticeEngine:
    return practice_engine
