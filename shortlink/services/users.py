import logging
import time

from shortlink.core.errors import InvalidCredentialsError, ValidationError
from shortlink.core.security import hash_password, verify_password
from shortlink.db.stores import Credential, CredentialStore
from shortlink.services.token_codec import TokenCodec

logger = logging.getLogger(__name__)


def _require(value, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(f"{field} is required")
    return value


class UserService:

    def __init__(self, store: CredentialStore, codec: TokenCodec, bcrypt_rounds: int = 10):
        self.store = store
        self.codec = codec
        self.bcrypt_rounds = bcrypt_rounds

    def register(self, username, password) -> Credential:
        username = _require(username, "username")
        password = _require(password, "password")

        credential = Credential(username=username, password_hash=hash_password(password, self.bcrypt_rounds))
        self.store.add(credential)
        logger.info(f"Registered user {username}")
        return credential

    def login(self, username, password) -> str:
        """Check the password and return a freshly signed token."""
        if not isinstance(username, str) or not isinstance(password, str):
            raise InvalidCredentialsError()

        credential = self.store.get(username)
        if credential is None or not verify_password(password, credential.password_hash):
            logger.warning(f"Failed login for {username}")
            raise InvalidCredentialsError()

        return self.codec.issue({"username": username, "iat": int(time.time())})
