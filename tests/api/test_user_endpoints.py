# This file tests the users endpoints end to end against an in-memory document store.
# It exists to protect the status codes and payload shapes clients depend on.
# The tests cover creation, duplicate emails, lookups, partial updates, and deletion.

from __future__ import annotations

from bson import ObjectId

from tests.api.support import api_test_client

USER_PAYLOAD = {"name": "A", "email": "a@x.com", "age": 30}


def test_create_user_returns_201_with_generated_id() -> None:
    with api_test_client() as client:
        response = client.post("/users", json=USER_PAYLOAD)

    assert response.status_code == 201
    payload = response.json()
    assert ObjectId.is_valid(payload["id"])
    assert payload["email"] == "a@x.com"
    assert payload["isActive"] is True
    assert payload["tags"] == []
    assert payload["createdAt"]
    assert payload["updatedAt"]


def test_create_user_with_same_email_returns_409() -> None:
    with api_test_client() as client:
        first = client.post("/users", json=USER_PAYLOAD)
        second = client.post("/users", json={**USER_PAYLOAD, "name": "B"})

    assert first.status_code == 201
    assert second.status_code == 409
    body = second.json()
    assert body["statusCode"] == 409
    assert body["message"] == "Email already exists"
    assert body["path"] == "/users"
    assert "timestamp" in body


def test_duplicate_email_check_ignores_case() -> None:
    with api_test_client() as client:
        client.post("/users", json=USER_PAYLOAD)
        response = client.post("/users", json={**USER_PAYLOAD, "email": "  A@X.COM "})

    assert response.status_code == 409


def test_create_user_rejects_invalid_payload_with_400() -> None:
    with api_test_client() as client:
        bad_age = client.post("/users", json={**USER_PAYLOAD, "age": 151})
        bad_email = client.post("/users", json={**USER_PAYLOAD, "email": "not-an-email"})
        unknown_field = client.post("/users", json={**USER_PAYLOAD, "role": "admin"})
        missing_name = client.post("/users", json={"email": "a@x.com", "age": 30})

    for response in (bad_age, bad_email, unknown_field, missing_name):
        assert response.status_code == 400
        assert response.json()["errorCode"] == "VALIDATION_ERROR"


def test_list_and_active_users() -> None:
    with api_test_client() as client:
        client.post("/users", json=USER_PAYLOAD)
        client.post("/users", json={"name": "B", "email": "b@x.com", "age": 40, "isActive": False})
        all_users = client.get("/users")
        active_users = client.get("/users/active")

    assert all_users.status_code == 200
    assert len(all_users.json()) == 2
    assert [user["email"] for user in active_users.json()] == ["a@x.com"]


def test_get_user_by_id_and_email() -> None:
    with api_test_client() as client:
        created = client.post("/users", json=USER_PAYLOAD).json()
        by_id = client.get(f"/users/{created['id']}")
        by_email = client.get("/users/email/A@x.com")
        missing_email = client.get("/users/email/nobody@x.com")

    assert by_id.status_code == 200
    assert by_id.json()["name"] == "A"
    assert by_email.status_code == 200
    assert by_email.json()["id"] == created["id"]
    assert missing_email.status_code == 404


def test_invalid_id_is_400_and_unknown_id_is_404() -> None:
    with api_test_client() as client:
        invalid = client.get("/users/not-an-id")
        missing = client.get(f"/users/{ObjectId()}")

    assert invalid.status_code == 400
    assert invalid.json()["message"].startswith("Invalid MongoDB ObjectId")
    assert missing.status_code == 404


def test_patch_user_preserves_unspecified_fields() -> None:
    with api_test_client() as client:
        created = client.post("/users", json={**USER_PAYLOAD, "tags": ["dev"]}).json()
        response = client.patch(f"/users/{created['id']}", json={"age": 31})

    assert response.status_code == 200
    payload = response.json()
    assert payload["age"] == 31
    assert payload["name"] == "A"
    assert payload["tags"] == ["dev"]


def test_patch_user_rejects_email_taken_by_another_user() -> None:
    with api_test_client() as client:
        client.post("/users", json=USER_PAYLOAD)
        other = client.post("/users", json={**USER_PAYLOAD, "email": "b@x.com"}).json()
        conflict = client.patch(f"/users/{other['id']}", json={"email": "A@x.com"})
        same_email = client.patch(f"/users/{other['id']}", json={"email": "b@x.com"})

    assert conflict.status_code == 409
    assert same_email.status_code == 200


def test_patch_user_rejects_null_fields() -> None:
    with api_test_client() as client:
        created = client.post("/users", json=USER_PAYLOAD).json()
        response = client.patch(f"/users/{created['id']}", json={"name": None})

    assert response.status_code == 400


def test_patch_missing_user_returns_404() -> None:
    with api_test_client() as client:
        response = client.patch(f"/users/{ObjectId()}", json={"age": 20})

    assert response.status_code == 404


def test_delete_user_twice_returns_404_the_second_time() -> None:
    with api_test_client() as client:
        created = client.post("/users", json=USER_PAYLOAD).json()
        first = client.delete(f"/users/{created['id']}")
        second = client.delete(f"/users/{created['id']}")

    assert first.status_code == 204
    assert first.content == b""
    assert second.status_code == 404
