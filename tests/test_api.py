from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from akin_state.api.app import create_app
from akin_state.config import Settings
from akin_state.errors import StoreError
from akin_state.memory_store import InMemoryAkinStore
from akin_state.state.service import AkinService


@pytest.fixture
def client():  # type: ignore[no-untyped-def]
    app = create_app(service=AkinService(InMemoryAkinStore()))
    with TestClient(app) as test_client:
        yield test_client


def test_get_state_on_empty_store(client: TestClient) -> None:
    response = client.get("/api/akin")

    assert response.status_code == 200
    assert response.json() == {"profile": None, "abilities": [], "virtues": [], "flaws": []}


def test_put_profile_returns_defaulted_profile(client: TestClient) -> None:
    response = client.put("/api/akin", json={"name": "Akin", "characteristics": {"int": 3}})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "akin"
    assert body["name"] == "Akin"
    assert body["characteristics"]["int"] == 3
    assert body["characteristics"]["qik"] == 0
    assert len(body["arts"]) == 15
    assert body["created_at"]


def test_put_profile_without_body(client: TestClient) -> None:
    response = client.put("/api/akin")

    assert response.status_code == 200
    assert response.json()["name"] == ""


def test_ability_lifecycle(client: TestClient) -> None:
    created = client.post("/api/akin/abilities", json={"name": "Awareness", "value": 3})
    assert created.status_code == 201
    ability = created.json()
    assert ability["specialty"] is None

    updated = client.put(
        f"/api/akin/abilities/{ability['id']}",
        json={"name": "Awareness", "value": 4, "specialty": "alertness"},
    )
    assert updated.status_code == 200
    assert updated.json()["value"] == 4

    state = client.get("/api/akin").json()
    assert state["abilities"] == [updated.json()]

    deleted = client.delete(f"/api/akin/abilities/{ability['id']}")
    assert deleted.status_code == 204
    assert client.get("/api/akin").json()["abilities"] == []


def test_create_with_missing_fields_is_400(client: TestClient) -> None:
    response = client.post("/api/akin/virtues", json={"name": "Gentle Gift"})

    assert response.status_code == 400
    body = response.json()
    assert body["missing_fields"] == ["description"]
    assert "description" in body["error"]


def test_update_unknown_item_is_404(client: TestClient) -> None:
    response = client.put("/api/akin/flaws/flaw-missing", json={"name": "x", "description": "y"})

    assert response.status_code == 404
    assert "flaw-missing" in response.json()["error"]


def test_delete_unknown_item_is_204(client: TestClient) -> None:
    assert client.delete("/api/akin/virtues/virt-missing").status_code == 204


def test_unknown_collection_is_404(client: TestClient) -> None:
    response = client.post("/api/akin/spells", json={"name": "Pilum of Fire"})

    assert response.status_code == 404
    assert response.json() == {"error": "Unknown collection: spells"}


def test_virtue_flag_is_boolean_over_http(client: TestClient) -> None:
    created = client.post("/api/akin/virtues", json={"name": "Gentle Gift", "description": "...", "is_major": True})
    virtue_id = created.json()["id"]

    client.put(f"/api/akin/virtues/{virtue_id}", json={"name": "Gentle Gift", "description": "...", "is_major": False})

    assert client.get("/api/akin").json()["virtues"][0]["is_major"] is False


def test_health_reports_backend(client: TestClient) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
    assert response.json()["backend"] == "memory"


class _BrokenStore(InMemoryAkinStore):
    async def ping(self) -> None:
        raise StoreError("database is locked")

    async def fetch_profile_row(self, profile_id):  # type: ignore[no-untyped-def]
        raise StoreError("database is locked")


def test_store_errors_become_500_and_health_503() -> None:
    app = create_app(service=AkinService(_BrokenStore()))
    with TestClient(app) as client:
        state = client.get("/api/akin")
        health = client.get("/api/health")

    assert state.status_code == 500
    assert state.json() == {"error": "Internal server error"}
    assert health.status_code == 503
    assert health.json()["status"] == "ERROR"


def test_app_builds_sqlite_backend_from_settings(tmp_path: Path) -> None:
    settings = Settings(
        backend="sqlite",
        sqlite_path=tmp_path / "akin.db",
        sqlite_busy_timeout_ms=1000,
        postgres_dsn="",
        profile_id="akin",
        api_host="127.0.0.1",
        api_port=3000,
        log_level="INFO",
    )

    with TestClient(create_app(settings)) as client:
        client.put("/api/akin", json={"name": "Akin"})
        client.post("/api/akin/abilities", json={"name": "Awareness", "value": 3})
        state = client.get("/api/akin").json()

    assert state["profile"]["name"] == "Akin"
    assert state["abilities"][0]["name"] == "Awareness"
    assert (tmp_path / "akin.db").exists()


def test_put_profile_with_out_of_range_age(client: TestClient) -> None:
    response = client.put("/api/akin", json={"name": "Akin", "age": 10**20})

    assert response.status_code == 200
    assert response.json()["age"] is None


def test_create_ability_with_out_of_range_value(client: TestClient) -> None:
    response = client.post("/api/akin/abilities", json={"name": "Awareness", "value": 10**20})

    assert response.status_code == 400
    assert response.json()["invalid_fields"] == ["value"]
    assert client.get("/api/akin").json()["abilities"] == []
