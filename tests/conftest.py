"""
Shared fixtures for the HTTP tests.

Each test gets its own data directory seeded with the demo records and
reconciled, the same startup path the real server takes.
"""

import pytest
from fastapi.testclient import TestClient

from qadash.api.app import create_app
from qadash.config import Settings


ADMIN = ("admin@qa-team.com", "admin123")
LEAD = ("lead@qa-team.com", "lead123")
ANALYST = ("analyst@qa-team.com", "analyst123")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environment="test",
        data_dir=str(tmp_path / "data"),
        seed_demo_data=True,
        reconcile_on_startup=True,
        accept_any_reset_code=True,
        sentry_dsn="",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def login(client, email, password):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    return auth_headers(login(client, *ADMIN)["token"])


@pytest.fixture
def lead_headers(client):
    return auth_headers(login(client, *LEAD)["token"])


@pytest.fixture
def analyst_headers(client):
    return auth_headers(login(client, *ANALYST)["token"])
