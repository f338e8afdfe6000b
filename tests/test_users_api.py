"""Tests for user profile endpoints."""
from datetime import datetime

import pytest


@pytest.fixture
def user_body():
    return {
        "firstName": "Ada",
        "email": "e1@example.com",
        "password": "s3cret",
        "imgUrl": "https://img.example.com/ada.png",
    }


def test_create_user(client, user_body):
    response = client.post("/users", json=user_body)
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "User created successfully"
    assert data["insertedId"]

    profile = client.get("/users/by-email", params={"email": "e1@example.com"}).json()
    assert profile["_id"] == data["insertedId"]
    assert profile["firstName"] == "Ada"
    assert profile["imgUrl"] == user_body["imgUrl"]
    assert profile["createdAt"] is not None
    assert profile["updatedAt"] is None


def test_same_email_updates_existing_user(client, stores, user_body):
    created = client.post("/users", json=user_body).json()

    user_body["firstName"] = "Augusta"
    response = client.post("/users", json=user_body)
    assert response.status_code == 200
    updated = response.json()
    assert updated["message"] == "User updated successfully"
    assert updated["insertedId"] == created["insertedId"]

    profile = client.get("/users/by-email", params={"email": "e1@example.com"}).json()
    assert profile["firstName"] == "Augusta"
    assert profile["_id"] == created["insertedId"]
    assert datetime.fromisoformat(profile["updatedAt"]) >= datetime.fromisoformat(profile["createdAt"])
    assert len(stores.users._by_email) == 1


def test_update_keeps_password_when_omitted(client, stores, user_body):
    client.post("/users", json=user_body)

    del user_body["password"]
    client.post("/users", json=user_body)
    assert stores.users._by_email["e1@example.com"]["password"] == "s3cret"

    user_body["password"] = "n3w"
    client.post("/users", json=user_body)
    assert stores.users._by_email["e1@example.com"]["password"] == "n3w"


def test_create_without_password(client, user_body):
    del user_body["password"]
    response = client.post("/users", json=user_body)
    assert response.status_code == 200
    assert response.json()["message"] == "User created successfully"


@pytest.mark.parametrize("missing", ["firstName", "email", "imgUrl"])
def test_create_user_requires_fields(client, user_body, missing):
    del user_body[missing]
    response = client.post("/users", json=user_body)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid data"


def test_create_user_rejects_empty_fields(client, user_body):
    user_body["firstName"] = ""
    response = client.post("/users", json=user_body)
    assert response.status_code == 400
    assert client.get("/users/by-email", params={"email": "e1@example.com"}).status_code == 404


def test_user_by_email_never_returns_password(client, user_body):
    client.post("/users", json=user_body)

    response = client.get("/users/by-email", params={"email": "e1@example.com"})
    assert response.status_code == 200
    data = response.json()
    assert "password" not in data
    assert set(data) == {"_id", "firstName", "email", "imgUrl", "createdAt", "updatedAt"}


def test_user_by_email_not_found(client):
    response = client.get("/users/by-email", params={"email": "ghost@example.com"})
    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_user_by_email_requires_email(client):
    response = client.get("/users/by-email")
    assert response.status_code == 400
    assert response.json() == {"message": "Email is required"}
