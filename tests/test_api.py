"""Tests for the HTTP entry points."""

import json
from threading import Event, Thread

import pytest
from fastapi.testclient import TestClient

from app import deps
from app.deps import activity_store
from app.main import app
from facade.activity_store_facade import ActivityStoreFacade

from conftest import GAME_ID


@pytest.fixture
def client(repository, local_system):
    store = ActivityStoreFacade(repository, local_system)
    app.dependency_overrides[activity_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def session_payload(elapsed=100):
    return json.dumps([{
        "GameId": str(GAME_ID),
        "ConfigurationName": "Speedrun",
        "GameActionName": "Play",
        "DateSessionUtc": "2024-03-10T18:30:00Z",
        "ElapsedSeconds": elapsed,
    }])


class TestSyncEndpoints:
    """Test export and import over HTTP."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["ok"] is True

    def test_export_empty(self, client):
        response = client.get("/sessions/export")

        assert response.status_code == 200
        assert response.json() == []

    def test_import_then_export(self, client):
        response = client.post("/sessions/import", content=session_payload())

        assert response.status_code == 200
        assert response.json() == {"Applied": 1, "Updated": 0, "Skipped": 0, "Errors": 0, "Error": None}

        exported = client.get("/sessions/export").json()
        assert len(exported) == 1
        assert exported[0]["ConfigurationName"] == "Speedrun"
        assert exported[0]["ElapsedSeconds"] == 100

    def test_import_empty_body(self, client):
        response = client.post("/sessions/import")

        assert response.status_code == 200
        assert response.json()["Errors"] == 0
        assert response.json()["Applied"] == 0

    def test_import_malformed_body(self, client):
        response = client.post("/sessions/import", content="<xml/>")

        assert response.status_code == 200
        assert response.json() == {"Applied": 0, "Updated": 0, "Skipped": 0, "Errors": 0, "Error": None}


class TestFacade:
    """Test backend selection."""

    def test_unsupported_backend(self, monkeypatch):
        monkeypatch.setenv("GAS_DB_BACKEND", "postgres")

        with pytest.raises(ValueError, match="Unsupported backend"):
            ActivityStoreFacade.from_env()


class TestStoreDependency:
    """Test that the process builds a single store."""

    def test_concurrent_first_calls_share_one_store(self, monkeypatch):
        built = []
        gate = Event()

        def slow_from_env():
            gate.wait(timeout=1)
            built.append(object())
            return built[-1]

        monkeypatch.setattr(deps, "_store", None)
        monkeypatch.setattr(ActivityStoreFacade, "from_env", staticmethod(slow_from_env))
        results = []
        threads = [Thread(target=lambda: results.append(deps.activity_store())) for _ in range(4)]
        for t in threads:
            t.start()
        gate.set()
        for t in threads:
            t.join(timeout=10)

        assert len(built) == 1
        assert len(results) == 4
        assert all(r is built[0] for r in results)
