import pytest

from shortlink.api import deps
from shortlink.core.config import settings
from shortlink.db.repository import SQLCredentialStore, SQLMappingStore
from shortlink.db.stores import InMemoryCredentialStore, InMemoryMappingStore


@pytest.fixture
def fresh_providers():
    providers = [deps.get_engine, deps.get_session_factory, deps.get_credential_store, deps.get_mapping_store]
    for provider in providers:
        provider.cache_clear()
    yield
    for provider in providers:
        provider.cache_clear()


def test_memory_backend_by_default(fresh_providers):
    assert isinstance(deps.get_credential_store(), InMemoryCredentialStore)
    assert isinstance(deps.get_mapping_store(), InMemoryMappingStore)
    assert deps.get_mapping_store() is deps.get_mapping_store()


def test_sql_backend(fresh_providers, monkeypatch):
    monkeypatch.setattr(settings, "STORAGE_BACKEND", "sql")
    monkeypatch.setattr(settings, "DATABASE_URL", "sqlite:///:memory:")

    assert isinstance(deps.get_credential_store(), SQLCredentialStore)
    store = deps.get_mapping_store()
    assert isinstance(store, SQLMappingStore)
    assert store.generator.max_attempts == settings.CODE_MAX_ATTEMPTS


def test_cache_disabled_without_redis_url(monkeypatch):
    monkeypatch.setattr(settings, "REDIS_URL", None)
    deps.get_url_cache.cache_clear()
    try:
        assert deps.get_url_cache() is None
    finally:
        deps.get_url_cache.cache_clear()


def test_token_codec_uses_configured_secret():
    deps.get_token_codec.cache_clear()
    try:
        token = deps.get_token_codec().issue({"username": "alice"})
    finally:
        deps.get_token_codec.cache_clear()
    assert deps.get_token_codec().verify(token) == {"username": "alice"}


def test_mapping_store_has_no_cache_without_redis_url(fresh_providers, monkeypatch):
    monkeypatch.setattr(settings, "REDIS_URL", None)
    deps.get_url_cache.cache_clear()
    try:
        store = deps.get_mapping_store()
        assert store.cache is None
        assert deps.get_url_service(store).cache is None
    finally:
        deps.get_url_cache.cache_clear()
