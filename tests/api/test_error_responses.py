# This file tests the uniform error payload produced by the exception handlers.
# It exists so every failure kind keeps its status code and never leaks internal details.

from __future__ import annotations

import logging

import pytest
from bson import ObjectId

from src.api.app import app
from src.api.dependencies import get_user_service
from tests.api.support import api_test_client


class ExplodingUserService:
    def find_all(self) -> list[dict[str, object]]:
        raise RuntimeError("connection string with secret password")


def test_unexpected_failure_returns_generic_500() -> None:
    app.dependency_overrides[get_user_service] = lambda: ExplodingUserService()
    with api_test_client(raise_server_exceptions=False) as client:
        response = client.get("/users")

    assert response.status_code == 500
    body = response.json()
    assert body["statusCode"] == 500
    assert body["message"] == "Internal server error"
    assert body["path"] == "/users"
    assert "secret" not in response.text


def test_unknown_route_uses_error_shape() -> None:
    with api_test_client() as client:
        response = client.get("/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert set(body) >= {"statusCode", "timestamp", "path", "message"}
    assert body["path"] == "/does-not-exist"


def test_validation_errors_list_offending_fields() -> None:
    with api_test_client() as client:
        response = client.post("/users", json={"name": "A", "email": "a@x.com", "age": "old"})

    assert response.status_code == 400
    fields = [detail["field"] for detail in response.json()["details"]]
    assert "body.age" in fields


def test_not_found_is_logged_once(caplog: pytest.LogCaptureFixture) -> None:
    missing = ObjectId()
    with caplog.at_level(logging.DEBUG):
        with api_test_client() as client:
            response = client.get(f"/users/{missing}")

    assert response.status_code == 404
    mentions = [
        record
        for record in caplog.records
        if record.levelno >= logging.WARNING and str(missing) in record.getMessage()
    ]
    assert len(mentions) == 1
    assert mentions[0].name == "src.api.error_handlers"
