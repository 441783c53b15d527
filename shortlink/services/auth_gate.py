import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from shortlink.core.errors import AuthenticationError, AuthorizationError
from shortlink.services.token_codec import MalformedToken, TokenCodec, VerificationError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Identity:
    """The authenticated caller of a single request."""

    username: str
    claims: Dict[str, Any] = field(default_factory=dict)


class AuthGate:
    """Turn an Authorization header into an Identity or reject the request.

    Missing headers and structurally broken tokens are authentication
    failures (401). Tokens that parse but fail the signature, carry an
    unreadable payload, or have expired are authorization failures (403).
    Nothing is cached between requests.
    """

    def __init__(self, codec: TokenCodec, token_ttl_seconds: Optional[int] = None, clock=time.time):
        self.codec = codec
        self.token_ttl_seconds = token_ttl_seconds
        self._clock = clock

    def authenticate(self, authorization: Optional[str]) -> Identity:
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            raise AuthenticationError()

        token = authorization[len(BEARER_PREFIX):].strip()
        try:
            claims = self.codec.verify(token)
        except MalformedToken:
            raise AuthenticationError()
        except VerificationError as e:
            logger.warning(f"Rejected bearer token: {type(e).__name__}")
            raise AuthorizationError()

        username = claims.get("username")
        if not isinstance(username, str) or not username:
            logger.warning("Rejected bearer token without a username claim")
            raise AuthorizationError()

        if self.token_ttl_seconds is not None:
            self._check_expiry(claims)

        return Identity(username=username, claims=claims)

    def _check_expiry(self, claims: Dict[str, Any]):
        issued_at = claims.get("iat")
        if isinstance(issued_at, bool) or not isinstance(issued_at, (int, float)):
            raise AuthorizationError("Token has no issue time")
        if self._clock() - issued_at > self.token_ttl_seconds:
            raise AuthorizationError("Token expired")
