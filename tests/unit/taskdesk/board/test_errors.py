from datetime import datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field
from pymongo.errors import ServerSelectionTimeoutError

from taskdesk.board.core.errors import register_exception_handlers
from taskdesk.board.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from taskdesk.core import get_logger


class _Body(BaseModel):
    title: str = Field(..., min_length=1)


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app, get_logger("tests.errors"))

    @app.get("/conflict")
    async def conflict():
        raise ConflictError("Task title must be unique")

    @app.get("/missing")
    async def missing():
        raise NotFoundError()

    @app.get("/unauthorized")
    async def unauthorized():
        raise UnauthorizedError("Invalid token")

    @app.post("/validate")
    async def validate(body: _Body):
        return body

    @app.get("/db-down")
    async def db_down():
        raise ServerSelectionTimeoutError("no servers")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    return TestClient(app, raise_server_exceptions=False)


class TestErrorEnvelope:
    def test_domain_error_envelope(self, client):
        response = client.get("/conflict")
        body = response.json()

        assert response.status_code == 409
        assert body["success"] is False
        assert body["statusCode"] == 409
        assert body["message"] == "Task title must be unique"
        assert body["path"] == "/conflict"
        assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None

    def test_default_message(self, client):
        assert client.get("/missing").json()["message"] == "Not found"

    def test_unauthorized_keeps_challenge_header(self, client):
        response = client.get("/unauthorized")
        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    def test_validation_error_is_400_with_messages(self, client):
        response = client.post("/validate", json={"title": ""})
        body = response.json()

        assert response.status_code == 400
        assert body["statusCode"] == 400
        assert isinstance(body["message"], list)
        assert body["message"][0].startswith("title:")

    def test_database_error_is_503(self, client):
        response = client.get("/db-down")
        assert response.status_code == 503
        assert response.json()["message"] == "Database connection failed"

    def test_unhandled_error_is_500_without_details(self, client):
        response = client.get("/boom")
        body = response.json()

        assert response.status_code == 500
        assert body["message"] == "Internal server error"
        assert "secret internals" not in response.text

    def test_unknown_route_uses_envelope(self, client):
        response = client.get("/nowhere")
        assert response.status_code == 404
        assert response.json()["success"] is False
