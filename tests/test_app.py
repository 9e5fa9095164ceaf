"""Service endpoints and the shape of error bodies."""

import logging

import pytest
from fastapi.testclient import TestClient

from app.core.logging import TokenRedactingFilter
from app.database import DocumentStore, MemoryStore, get_store
from app.main import app


def test_root_and_health(client):
    assert client.get("/").json()["docs"] == "/docs"

    health = client.get("/api/health")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert health.json()["mail"] == "disabled"


def test_unknown_route_uses_error_body(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_malformed_json_is_a_bad_request(client):
    response = client.post(
        "/api/bookings",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_store_errors_do_not_leak_details():
    class BrokenStore:
        durable = True
        name = "broken"

        async def list(self, *args, **kwargs):
            raise RuntimeError("firestore: permission denied on projects/secret-project")

    app.dependency_overrides[get_store] = lambda: BrokenStore()
    try:
        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/api/bookings")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_bearer_tokens_are_redacted_in_logs():
    record = logging.LogRecord("dental_clinic", logging.INFO, __file__, 1, "header was %s", ("Bearer abc.def-ghi",), None)

    TokenRedactingFilter().filter(record)
    assert record.getMessage() == "header was Bearer [redacted]"


def test_document_store_is_abstract():
    with pytest.raises(TypeError):
        DocumentStore()

    assert isinstance(MemoryStore(), DocumentStore)
