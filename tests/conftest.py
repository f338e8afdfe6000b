"""Shared fixtures; the API runs against the in-memory store."""
import os

os.environ["STORAGE_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient

from finance_api.main import app


@pytest.fixture
def client():
    """Client with a fresh, empty store for every test."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def stores(client):
    return client.app.state.stores


@pytest.fixture
def create_transaction(client):
    """POST a transaction and return its id."""

    def _create(**fields):
        body = {"email": "a@b.com", "amount": 10, "type": "expense", "category": "Food"}
        body.update(fields)
        response = client.post("/transactions", json=body)
        assert response.status_code == 200, response.text
        return response.json()["insertedId"]

    return _create
