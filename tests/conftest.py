"""Shared fixtures: an in-memory app, its test client and a logged-in user."""

from __future__ import annotations

import pytest

from config import TestConfig
from fittrack import create_app, db


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def register(client):
    """Register a user and return (user_json, auth_headers)."""

    def _register(email="runner@example.com", password="secret123"):
        resp = client.post("/api/auth/register", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.get_json()
        body = resp.get_json()
        return body["user"], {"Authorization": f"Bearer {body['token']}"}

    return _register


@pytest.fixture()
def auth_headers(register):
    _, headers = register()
    return headers
