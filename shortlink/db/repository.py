"""SQLAlchemy-backed implementations of the store interfaces."""
import logging
import threading
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from shortlink.core.errors import ConflictError, CodeSpaceExhaustedError, NotFoundOrDenied
from shortlink.db.Models.models import URLMapping, User
from shortlink.db.stores import (
    Credential,
    CredentialStore,
    Mapping,
    MappingStore,
    ensure_valid_url,
    owned_by,
)
from shortlink.utils.encoding import CodeGenerator
from shortlink.utils.validators import is_valid_url

logger = logging.getLogger(__name__)


def _to_mapping(row: Optional[URLMapping]) -> Optional[Mapping]:
    if row is None:
        return None
    return Mapping(code=row.code, target_url=row.target_url, owner_username=row.owner_username)


class _CodeLookup:
    """Lets the generator test candidates against the table without loading it."""

    def __init__(self, db: Session):
        self.db = db

    def __contains__(self, code) -> bool:
        return self.db.get(URLMapping, code) is not None


class SQLCredentialStore(CredentialStore):

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def add(self, credential: Credential) -> Credential:
        with self.session_factory() as db:
            db.add(User(username=credential.username, password_hash=credential.password_hash))
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise ConflictError()
        return credential

    def get(self, username: str) -> Optional[Credential]:
        with self.session_factory() as db:
            row = db.get(User, username)
            if row is None:
                return None
            return Credential(username=row.username, password_hash=row.password_hash)


class SQLMappingStore(MappingStore):
    """Mapping store over the ``url_mappings`` table.

    The in-process lock keeps this process's operations linearizable; the
    primary key catches codes claimed concurrently by another process, in
    which case the insert is retried with a fresh code. Cache writes for an
    update happen while the row lock is held, before the commit.
    """

    def __init__(self, session_factory: sessionmaker, generator: Optional[CodeGenerator] = None, cache=None):
        super().__init__(generator, cache)
        self.session_factory = session_factory
        self._lock = threading.Lock()

    def create(self, target_url: str, owner: str) -> Mapping:
        ensure_valid_url(target_url)
        with self._lock:
            for attempt in range(self.generator.max_attempts):
                with self.session_factory() as db:
                    code = self.generator.generate(target_url, _CodeLookup(db))
                    row = URLMapping(code=code, target_url=target_url, owner_username=owner)
                    db.add(row)
                    try:
                        db.commit()
                    except IntegrityError as e:
                        db.rollback()
                        logger.warning(
                            "IntegrityError creating URLMapping code=%s attempt=%s: %s",
                            code, attempt + 1, str(e.orig) if hasattr(e, "orig") else str(e),
                        )
                        continue
                    mapping = _to_mapping(row)
                    self._remember(mapping)
                    return mapping

        raise CodeSpaceExhaustedError(
            f"Failed to insert a unique short code after {self.generator.max_attempts} attempts"
        )

    def read(self, code: str, requester: str) -> Mapping:
        with self._lock, self.session_factory() as db:
            return owned_by(_to_mapping(db.get(URLMapping, code)), requester)

    def update(self, code: str, new_url: str, requester: str) -> Mapping:
        with self._lock, self.session_factory() as db:
            row = db.get(URLMapping, code, with_for_update=True)
            owned_by(_to_mapping(row), requester)
            if not is_valid_url(new_url):
                raise NotFoundOrDenied()
            row.target_url = new_url
            db.flush()
            mapping = _to_mapping(row)
            self._remember(mapping)
            try:
                db.commit()
            except Exception:
                self._forget(code)
                raise
            return mapping

    def delete(self, code: str, requester: str) -> None:
        with self._lock, self.session_factory() as db:
            row = db.get(URLMapping, code, with_for_update=True)
            owned_by(_to_mapping(row), requester)
            db.delete(row)
            db.commit()
            self._forget(code)
