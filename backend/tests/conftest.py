import os
import random
import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Read once at import time by core.config, so they must be in place before app modules load.
os.environ.setdefault("ENV", "development")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("AI_MODE", "mock")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("EMOTION_NORMALIZATION", "shift")
os.environ.setdefault("JWT_SECRET", "pytest-secret")


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ENV", "development")
    monkeypatch.setenv("AI_MODE", "mock")
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")


@pytest.fixture
def store():
    from app.storage.memory import MemoryStore

    return MemoryStore()


@pytest.fixture
def engine(store):
    from app.interview.engine import PracticeEngine

    return PracticeEngine(store, rng=random.Random(7))


@pytest.fixture
def client(store, engine):
    from fastapi.testclient import TestClient

    from app.main import app
    from app.runtime import get_practice_engine, get_store

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_practice_engine] = lambda: engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _register(client, email: str) -> dict:
    response = client.post("/api/auth/register", json={"email": email, "password": "secret123", "name": "Test"})
    assert response.status_code == 201, response.text
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client) -> dict:
    return _register(client, "candidate@example.com")


@pytest.fixture
def other_auth_headers(client) -> dict:
    return _register(client, "other@example.com")
