"""Storage interfaces and the default lock-guarded in-memory backend."""
import abc
import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import Dict, Optional

from shortlink.core.errors import ConflictError, NotFoundOrDenied, ValidationError
from shortlink.utils.encoding import CodeGenerator
from shortlink.utils.validators import is_valid_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    username: str
    password_hash: str


@dataclass(frozen=True)
class Mapping:
    code: str
    target_url: str
    owner_username: str


def ensure_valid_url(url) -> str:
    if not is_valid_url(url):
        raise ValidationError("URL not valid")
    return url


def owned_by(mapping: Optional[Mapping], requester: str) -> Mapping:
    """Ownership gate: absent and foreign mappings fail identically."""
    if mapping is None or mapping.owner_username != requester:
        raise NotFoundOrDenied()
    return mapping


class CredentialStore(abc.ABC):

    @abc.abstractmethod
    def add(self, credential: Credential) -> Credential:
        """Insert a new credential; raise ConflictError if the username is taken."""

    @abc.abstractmethod
    def get(self, username: str) -> Optional[Credential]:
        ...


class MappingStore(abc.ABC):
    """Short code to URL records, every access gated on the owner.

    ``read``, ``update`` and ``delete`` raise NotFoundOrDenied both when the
    code is unknown and when it belongs to another user. ``update`` also
    raises it for an invalid new URL.

    An optional ``cache`` (anything with ``put(mapping)`` and ``evict(code)``)
    is written only from create, update and delete, inside the same critical
    section as the store change, so a cached entry never outlives its record.
    """

    def __init__(self, generator: Optional[CodeGenerator] = None, cache=None):
        self.generator = generator or CodeGenerator()
        self.cache = cache

    def _remember(self, mapping: Mapping):
        if self.cache is not None:
            self.cache.put(mapping)

    def _forget(self, code: str):
        if self.cache is not None:
            self.cache.evict(code)

    @abc.abstractmethod
    def create(self, target_url: str, owner: str) -> Mapping:
        ...

    @abc.abstractmethod
    def read(self, code: str, requester: str) -> Mapping:
        ...

    @abc.abstractmethod
    def update(self, code: str, new_url: str, requester: str) -> Mapping:
        ...

    @abc.abstractmethod
    def delete(self, code: str, requester: str) -> None:
        ...


class InMemoryCredentialStore(CredentialStore):

    def __init__(self):
        self._lock = threading.Lock()
        self._users: Dict[str, Credential] = {}

    def add(self, credential: Credential) -> Credential:
        with self._lock:
            if credential.username in self._users:
                raise ConflictError()
            self._users[credential.username] = credential
        return credential

    def get(self, username: str) -> Optional[Credential]:
        with self._lock:
            return self._users.get(username)


class InMemoryMappingStore(MappingStore):
    """Dict-backed store; one lock serializes all operations."""

    def __init__(self, generator: Optional[CodeGenerator] = None, cache=None):
        super().__init__(generator, cache)
        self._lock = threading.Lock()
        self._urls: Dict[str, Mapping] = {}

    def create(self, target_url: str, owner: str) -> Mapping:
        ensure_valid_url(target_url)
        # generate, check and insert under one lock so concurrent creates never share a code
        with self._lock:
            code = self.generator.generate(target_url, self._urls)
            mapping = Mapping(code=code, target_url=target_url, owner_username=owner)
            self._urls[code] = mapping
            self._remember(mapping)
        return mapping

    def read(self, code: str, requester: str) -> Mapping:
        with self._lock:
            return owned_by(self._urls.get(code), requester)

    def update(self, code: str, new_url: str, requester: str) -> Mapping:
        with self._lock:
            current = owned_by(self._urls.get(code), requester)
            if not is_valid_url(new_url):
                raise NotFoundOrDenied()
            updated = dataclasses.replace(current, target_url=new_url)
            self._urls[current.code] = updated
            self._remember(updated)
        return updated

    def delete(self, code: str, requester: str) -> None:
        with self._lock:
            current = owned_by(self._urls.get(code), requester)
            del self._urls[current.code]
            self._forget(current.code)

    def __len__(self):
        with self._lock:
            return len(self._urls)
