"""Pytest configuration and fixtures for testing."""

from datetime import timedelta

import pytest

from models.db_storage import DBStorage
from profile_api import create_app
from profile_api.services import AuthService
from utils.security import PasswordHasher, TokenSigner

PASSWORD = "Passw0rd1"


@pytest.fixture
def storage():
    """Isolated in-memory database, independent of the app's shared storage."""
    db = DBStorage("sqlite://")
    db.reload()
    yield db
    db.dispose()


@pytest.fixture
def hasher():
    # cheap parameters keep the suite fast
    return PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def signer():
    return TokenSigner(
        access_secret="test-access-secret",
        refresh_secret="test-refresh-secret",
        access_expires=timedelta(minutes=15),
        refresh_expires=timedelta(days=7),
    )


@pytest.fixture
def auth_service(storage, hasher, signer):
    return AuthService(storage, hasher, signer)


@pytest.fixture
def register_data():
    def _make(email="a@x.com", username="alice", password=PASSWORD, display_name=None):
        return {
            "username": username,
            "display_name": display_name,
            "email": email,
            "password": password,
        }
    return _make


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    app.extensions["profile_api"]["storage"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def gql(client):
    """Post a GraphQL operation and return (status_code, json_body)."""
    def _post(query, variables=None, token=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        response = client.post(
            "/graphql",
            json={"query": query, "variables": variables or {}},
            headers=headers,
        )
        return response.status_code, response.get_json()
    return _post
