"""Compact HMAC-SHA256 bearer tokens.

Format: ``base64url(header).base64url(payload).base64url(signature)`` where
the signature is HMAC-SHA256 over ``base64url(header) + "." +
base64url(payload)``. Segments are unpadded base64url, so tokens are
byte-compatible with HS256 JWTs.
"""
import base64
import binascii
import hmac
import json
from hashlib import sha256
from typing import Any, Dict, Union

HEADER = {"alg": "HS256", "typ": "JWT"}

Secret = Union[bytes, str]


class VerificationError(Exception):
    """Base class for token verification failures."""


class MalformedToken(VerificationError):
    pass


class SignatureMismatch(VerificationError):
    pass


class MalformedPayload(VerificationError):
    pass


def _b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _json_segment(obj: Dict[str, Any]) -> str:
    text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
    return _b64url_encode(text.encode("utf-8"))


def _as_key(secret: Secret) -> bytes:
    return secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)


def _sign(signing_base: str, secret: Secret) -> str:
    digest = hmac.new(_as_key(secret), signing_base.encode("ascii"), sha256).digest()
    return _b64url_encode(digest)


def issue(claims: Dict[str, Any], secret: Secret) -> str:
    """Serialize ``claims`` into a signed token."""
    signing_base = f"{_json_segment(HEADER)}.{_json_segment(claims)}"
    return f"{signing_base}.{_sign(signing_base, secret)}"


def verify(token: str, secret: Secret) -> Dict[str, Any]:
    """Check the signature on ``token`` and return its claims.

    Raises MalformedToken unless the token has exactly three non-empty
    segments, SignatureMismatch if the signature does not match (compared in
    constant time), and MalformedPayload if the payload segment is not a
    base64url encoded JSON object.
    """
    parts = token.split(".") if isinstance(token, str) else []
    if len(parts) != 3 or not all(parts):
        raise MalformedToken("Token must consist of three non-empty segments")

    encoded_header, encoded_payload, received_signature = parts
    try:
        expected_signature = _sign(f"{encoded_header}.{encoded_payload}", secret)
    except UnicodeEncodeError as e:
        raise SignatureMismatch("Token signature does not match") from e

    if not hmac.compare_digest(expected_signature.encode("utf-8"), received_signature.encode("utf-8")):
        raise SignatureMismatch("Token signature does not match")

    try:
        payload = json.loads(_b64url_decode(encoded_payload).decode("utf-8"))
    except (binascii.Error, ValueError) as e:
        raise MalformedPayload("Token payload is not valid JSON") from e

    if not isinstance(payload, dict):
        raise MalformedPayload("Token payload must be a JSON object")
    return payload


class TokenCodec:
    """Binds the process-wide signing secret so it can be injected."""

    def __init__(self, secret: Secret):
        self._secret = _as_key(secret)

    def issue(self, claims: Dict[str, Any]) -> str:
        return issue(claims, self._secret)

    def verify(self, token: str) -> Dict[str, Any]:
        return verify(token, self._secret)

    def __repr__(self):
        return "TokenCodec(secret=***)"
