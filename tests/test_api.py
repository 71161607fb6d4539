"""API tests for the document read and dispatch endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from taskboard.main import app


@pytest.fixture()
def client(data_repo) -> TestClient:
    return TestClient(app)


def _event_payload(user_id: str) -> dict:
    return {
        "title": "Call customer",
        "description": "Confirm the delivery slot",
        "deadline": "2026-07-01",
        "time": "11:00",
        "status": "pending",
        "assignedUserId": user_id,
        "reminderEnabled": True,
        "reminderInterval": 60,
    }


def test_get_seeds_document(client: TestClient):
    resp = client.get("/api/data")

    assert resp.status_code == 200
    body = resp.json()
    assert body["events"] == []
    assert body["comments"] == []
    assert len(body["users"]) == 4
    assert {u["email"] for u in body["users"]} >= {"manager@example.com"}


def test_get_is_idempotent(client: TestClient):
    first = client.get("/api/data").json()
    second = client.get("/api/data").json()

    assert first == second


def test_add_event_returns_full_document(client: TestClient):
    user_id = client.get("/api/data").json()["users"][1]["id"]

    resp = client.post(
        "/api/data", json={"action": "ADD_EVENT", "payload": _event_payload(user_id)}
    )

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["users"]) == 4
    event = body["events"][0]
    assert event["assignedUserId"] == user_id
    assert event["time"] == "11:00:00"
    assert event["comments"] == []
    assert event["id"] and event["createdAt"]


def test_duplicate_user_is_400(client: TestClient, data_repo):
    client.get("/api/data")
    before = data_repo.path.read_bytes()

    resp = client.post(
        "/api/data",
        json={
            "action": "ADD_USER",
            "payload": {"name": "Copy", "email": "manager@example.com", "password": "x"},
        },
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "User already exists"
    assert data_repo.path.read_bytes() == before


def test_duplicate_email_on_update_is_400(client: TestClient):
    users = client.get("/api/data").json()["users"]

    resp = client.post(
        "/api/data",
        json={
            "action": "UPDATE_USER",
            "payload": {"id": users[2]["id"], "updates": {"email": users[3]["email"]}},
        },
    )

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already exists"


def test_invalid_action_is_400(client: TestClient):
    resp = client.post("/api/data", json={"action": "RESET_EVERYTHING", "payload": {}})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid action"


def test_missing_action_is_400(client: TestClient):
    resp = client.post("/api/data", json={"payload": {}})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid action"


def test_missing_required_field_is_400(client: TestClient):
    resp = client.post(
        "/api/data",
        json={"action": "ADD_COMMENT", "payload": {"eventId": "e-1", "userId": "u-1"}},
    )

    assert resp.status_code == 400
    assert "content" in resp.json()["detail"]


def test_non_object_payload_is_400(client: TestClient):
    resp = client.post("/api/data", json={"action": "DELETE_EVENT", "payload": ["e-1"]})

    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Invalid payload")


def test_unexpected_failure_is_500(client: TestClient, data_repo, monkeypatch):
    def _explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(data_repo, "dispatch", _explode)

    resp = client.post("/api/data", json={"action": "ADD_EVENT", "payload": {}})

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Internal server error"


def test_unreadable_data_dir_is_500(client: TestClient, data_repo, monkeypatch):
    def _no_dir():
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(data_repo, "_ensure_data_dir", _no_dir)

    resp = client.get("/api/data")

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to read data"


def test_health(client: TestClient):
    assert client.get("/api/health").json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# Packing estimate
# ---------------------------------------------------------------------------


def test_packing_estimate(client: TestClient):
    resp = client.post("/api/packing", json={"length": 50, "width": 40, "height": 30})

    assert resp.status_code == 200
    body = resp.json()
    assert set(body) == {"20ft", "40ft"}
    assert body["20ft"]["count"] > 0
    assert body["40ft"]["count"] >= body["20ft"]["count"]


def test_packing_rejects_non_positive_dimensions(client: TestClient):
    resp = client.post("/api/packing", json={"length": 0, "width": 40, "height": 30})

    assert resp.status_code == 422
