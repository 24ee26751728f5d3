import os
import tempfile
from pathlib import Path

DB_PATH = Path(tempfile.mkdtemp(prefix="dreamboard-tests-")) / "dreamboard.db"

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["OPENAI_API_KEY"] = ""
os.environ["SESSION_SECRET_KEY"] = "test-secret"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from main import app  # noqa: E402


def _remove_db():
    if DB_PATH.exists():
        DB_PATH.unlink()


@pytest.fixture
def client():
    _remove_db()
    with TestClient(app) as test_client:
        yield test_client
    _remove_db()


@pytest.fixture
def run(client):
    """Run a coroutine function on the app's event loop"""
    def _run(fn, *args):
        return client.portal.call(fn, *args)
    return _run


@pytest.fixture
def no_enrichment(monkeypatch):
    async def noop(*args, **kwargs):
        return None

    monkeypatch.setattr("routes.dreams.enrich_new_dream", noop)
    monkeypatch.setattr("routes.tasks.refresh_dream_progress", noop)


def register(client, username="dreamer", password="secret123"):
    response = client.post("/api/register", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def create_dream(client, title="Run a marathon", **fields):
    response = client.post("/api/dreams", json={"title": title, **fields})
    assert response.status_code == 201, response.text
    return response.json()
