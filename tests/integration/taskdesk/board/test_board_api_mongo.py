from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from taskdesk.board import TaskBoardService


@pytest.fixture
def client(board_env):
    """A task board backed by the test database; the lifespan opens and closes the store."""
    service = TaskBoardService()
    with TestClient(service.app) as client:
        yield client


def _register(client, name, email, role=None):
    body = {"name": name, "email": email, "password": "secret123"}
    if role:
        body["role"] = role
    return client.post("/auth/register", json=body)


def _login(client, email):
    response = client.post("/auth/login", json={"email": email, "password": "secret123"})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_duplicate_email_is_409(client):
    assert _register(client, "Amit", "amit@example.com").status_code == 201

    response = _register(client, "Amit", "Amit@Example.com")

    assert response.status_code == 409
    assert response.json()["message"] == "Email already registered"


def test_duplicate_title_is_409_across_owners(client):
    _register(client, "Amit", "amit@example.com")
    _register(client, "Bela", "bela@example.com")
    amit = _login(client, "amit@example.com")
    bela = _login(client, "bela@example.com")

    assert client.post("/tasks", json={"title": "Buy milk"}, headers=amit).status_code == 201
    response = client.post("/tasks", json={"title": "Buy milk"}, headers=bela)

    assert response.status_code == 409
    assert response.json()["message"] == "Task title must be unique"


def test_task_lifecycle_and_analytics(client):
    _register(client, "Root", "admin@example.com", role="ADMIN")
    _register(client, "Amit", "amit@example.com")
    admin = _login(client, "admin@example.com")
    amit = _login(client, "amit@example.com")

    created = client.post("/tasks", json={"title": "Buy milk"}, headers=amit).json()
    client.post("/tasks", json={"title": "Walk dog"}, headers=amit)

    done = client.put(f"/tasks/{created['id']}", json={"status": "DONE"}, headers=amit).json()
    assert done["status"] == "DONE"
    assert datetime.fromisoformat(done["completedAt"]) >= datetime.fromisoformat(done["createdAt"])

    listed = client.get("/tasks", headers=admin).json()
    assert {t["owner"]["email"] for t in listed} == {"amit@example.com"}

    analytics = client.get("/tasks/analytics/tasks", headers=admin).json()
    assert analytics["statusCounts"] == {"DONE": 1, "TODO": 1}
    assert analytics["perUserCounts"] == {created["ownerId"]: 2}
    assert float(analytics["avgCompletionTimeHours"]) >= 0.0

    assert client.delete(f"/tasks/{created['id']}", headers=amit).json()["message"] == "Task deleted successfully"
    assert client.get(f"/tasks/{created['id']}", headers=amit).status_code == 404
