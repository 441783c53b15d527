"""Process-wide collaborators, built once from settings and injected with Depends.

Tests replace any of these through ``app.dependency_overrides``.
"""
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from shortlink.core.config import settings
from shortlink.db.Connection import database
from shortlink.db.repository import SQLCredentialStore, SQLMappingStore
from shortlink.db.stores import (
    CredentialStore,
    InMemoryCredentialStore,
    InMemoryMappingStore,
    MappingStore,
)
from shortlink.services.auth_gate import AuthGate, Identity
from shortlink.services.RedisURLCache import RedisURLCache
from shortlink.services.shortener import URLService
from shortlink.services.token_codec import TokenCodec
from shortlink.services.users import UserService
from shortlink.utils.encoding import CodeGenerator

logger = logging.getLogger(__name__)


@lru_cache
def get_engine() -> Engine:
    return database.build_engine(settings.DATABASE_URL)


@lru_cache
def get_session_factory() -> sessionmaker:
    return database.build_session_factory(get_engine())


@lru_cache
def get_credential_store() -> CredentialStore:
    if settings.STORAGE_BACKEND == "sql":
        return SQLCredentialStore(get_session_factory())
    return InMemoryCredentialStore()


@lru_cache
def get_mapping_store() -> MappingStore:
    generator = CodeGenerator(max_attempts=settings.CODE_MAX_ATTEMPTS)
    if settings.STORAGE_BACKEND == "sql":
        return SQLMappingStore(get_session_factory(), generator, cache=get_url_cache())
    return InMemoryMappingStore(generator, cache=get_url_cache())


@lru_cache
def get_url_cache() -> Optional[RedisURLCache]:
    client = database.build_redis_client(settings.REDIS_URL)
    if client is None:
        return None
    database.verify_redis_connection(client)
    return RedisURLCache(client, ttl=settings.CACHE_TTL)


@lru_cache
def get_token_codec() -> TokenCodec:
    return TokenCodec(settings.JWT_SECRET.get_secret_value())


def get_auth_gate(codec: TokenCodec = Depends(get_token_codec)) -> AuthGate:
    return AuthGate(codec, token_ttl_seconds=settings.TOKEN_TTL_SECONDS)


def get_user_service(
    store: CredentialStore = Depends(get_credential_store),
    codec: TokenCodec = Depends(get_token_codec),
) -> UserService:
    return UserService(store, codec, bcrypt_rounds=settings.BCRYPT_ROUNDS)


def get_url_service(store: MappingStore = Depends(get_mapping_store)) -> URLService:
    # reads go through the same cache the store writes
    return URLService(store, store.cache)


def get_current_user(
    authorization: Optional[str] = Header(None),
    gate: AuthGate = Depends(get_auth_gate),
) -> Identity:
    return gate.authenticate(authorization)
