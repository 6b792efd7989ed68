# mypy: ignore-errors
# tests/test_health.py
"""Tests for service endpoints and the shared error body."""

from fastapi import status


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "OK"
    assert data["environment"]
    assert "timestamp" in data


def test_root(client) -> None:
    data = client.get("/").json()
    assert data["name"] == "Thought Dump API"
    assert data["docs"] == "/docs"


def test_unknown_route_uses_error_body(client) -> None:
    response = client.get("/api/v1/nowhere")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"message": "Not Found", "code": "NOT_FOUND"}


def test_wrong_method_uses_error_body(client) -> None:
    response = client.delete("/api/v1/topics/")
    assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
    assert response.json()["code"] == "METHOD_NOT_ALLOWED"
