import os

# settings are read at import time
os.environ["JWT_SECRET"] = "test-secret"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("REDIS_URL", None)
os.environ.pop("TOKEN_TTL_SECONDS", None)

import pytest
import redis.exceptions
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from shortlink.main import app
from shortlink.api import deps
from shortlink.db.Connection.database import build_session_factory
from shortlink.db.Models.models import Base
from shortlink.db.stores import InMemoryCredentialStore, InMemoryMappingStore
from shortlink.services.token_codec import TokenCodec


TEST_SECRET = "test-secret"

# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"


class FakeRedis:
    """Just enough of redis.Redis for the URL cache."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def delete(self, key):
        self.data.pop(key, None)
        self.ttls.pop(key, None)


class DownRedis:

    def _fail(self, *args, **kwargs):
        raise redis.exceptions.ConnectionError("connection refused")

    get = setex = delete = _fail


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def down_redis():
    return DownRedis()


@pytest.fixture
def session_factory():
    """Creates a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield build_session_factory(engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def codec():
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()


@pytest.fixture
def mapping_store():
    return InMemoryMappingStore()


@pytest.fixture
def client(credential_store, mapping_store, codec):
    """Creates a test client with fresh stores."""
    app.dependency_overrides[deps.get_credential_store] = lambda: credential_store
    app.dependency_overrides[deps.get_mapping_store] = lambda: mapping_store
    app.dependency_overrides[deps.get_token_codec] = lambda: codec
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Registers a user and returns the Authorization header for them."""
    def _login(username, password="secret1"):
        client.post("/users", json={"username": username, "password": password})
        response = client.post("/users/login", json={"username": username, "password": password})
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _login


@pytest.fixture
def sample_urls():
    """Provides sample URLs for testing."""
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]
