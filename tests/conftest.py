"""
Pytest configuration and fixtures
"""
import pytest
from fastapi.testclient import TestClient

from buziz.core.security import create_access_token
from buziz.db.local_store import LocalStore
from buziz.dependencies.storage import get_change_feed, get_data_access
from buziz.main import app
from buziz.storage.backends import LocalBackend
from buziz.storage.data_access import DataAccess
from buziz.storage.events import ChangeFeed


@pytest.fixture
def data_access():
    """Data access layer on in-memory local persistence"""
    return DataAccess(remote=None, local=LocalBackend(LocalStore()), mode="local")


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def client(data_access, feed):
    """Test client wired to a fresh store for each test"""
    app.dependency_overrides[get_data_access] = lambda: data_access
    app.dependency_overrides[get_change_feed] = lambda: feed
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build bearer headers for a user id"""
    def _headers(user_id: str):
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _headers


@pytest.fixture
def office(client, auth_headers):
    """An office created by user-owner"""
    response = client.post(
        "/api/v1/offices",
        json={"name": "Olivia Owner", "officeName": "Corner Cafe"},
        headers=auth_headers("user-owner")
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def joined(client, auth_headers, office):
    """user-member joined the office"""
    response = client.post(
        "/api/v1/offices/join",
        json={"officeCode": office["office"]["code"], "name": "Mark Member"},
        headers=auth_headers("user-member")
    )
    assert response.status_code == 200
    return response.json()
