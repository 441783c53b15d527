import base64
import hashlib
import hmac
import json

import pytest

from shortlink.services.token_codec import (
    MalformedPayload,
    MalformedToken,
    SignatureMismatch,
    TokenCodec,
    VerificationError,
    issue,
    verify,
)


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def unb64url(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


def signed(header_segment: str, payload_segment: str, secret: bytes) -> str:
    base = f"{header_segment}.{payload_segment}"
    signature = hmac.new(secret, base.encode("ascii"), hashlib.sha256).digest()
    return f"{base}.{b64url(signature)}"


def flip(segment: str, index: int) -> str:
    replacement = "A" if segment[index] != "A" else "B"
    return segment[:index] + replacement + segment[index + 1:]


@pytest.mark.parametrize("payload", [
    {"username": "alice", "iat": 1700000000},
    {"username": "bob"},
    {},
    {"username": "ünïcødé", "nested": {"list": [1, 2.5, None, True]}},
])
@pytest.mark.parametrize("secret", [b"k", b"a much longer secret key" * 4, "str-secret"])
def test_round_trip(payload, secret):
    assert verify(issue(payload, secret), secret) == payload


def test_wire_format():
    token = issue({"username": "alice", "iat": 1}, b"key")
    header, payload, signature = token.split(".")

    assert "=" not in token
    assert unb64url(header) == b'{"alg":"HS256","typ":"JWT"}'
    assert json.loads(unb64url(payload)) == {"username": "alice", "iat": 1}
    assert token == signed(header, payload, b"key")


def test_str_and_bytes_secrets_are_equivalent():
    assert issue({"username": "alice"}, "key") == issue({"username": "alice"}, b"key")


def test_tampered_header_or_payload_is_rejected():
    token = issue({"username": "alice", "iat": 1700000000}, b"key")
    header, payload, signature = token.split(".")

    for i in range(len(header)):
        with pytest.raises(VerificationError):
            verify(f"{flip(header, i)}.{payload}.{signature}", b"key")
    for i in range(len(payload)):
        with pytest.raises(VerificationError):
            verify(f"{header}.{flip(payload, i)}.{signature}", b"key")


def test_tampered_signature_is_rejected():
    header, payload, signature = issue({"username": "alice"}, b"key").split(".")
    with pytest.raises(SignatureMismatch):
        verify(f"{header}.{payload}.{flip(signature, 0)}", b"key")


def test_swapped_payload_is_rejected():
    alice = issue({"username": "alice"}, b"key").split(".")
    bob = issue({"username": "bob"}, b"key").split(".")
    with pytest.raises(SignatureMismatch):
        verify(f"{alice[0]}.{bob[1]}.{alice[2]}", b"key")


def test_wrong_secret_is_rejected():
    token = issue({"username": "alice"}, b"right")
    with pytest.raises(SignatureMismatch):
        verify(token, b"wrong")


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "a..c", ".b.c", "a.b."])
def test_malformed_token(token):
    with pytest.raises(MalformedToken):
        verify(token, b"key")


def test_non_ascii_token_is_a_signature_mismatch():
    with pytest.raises(SignatureMismatch):
        verify("héader.payload.sig", b"key")


def test_payload_that_is_not_json():
    header = b64url(b'{"alg":"HS256","typ":"JWT"}')
    token = signed(header, b64url(b"not json at all"), b"key")
    with pytest.raises(MalformedPayload):
        verify(token, b"key")


def test_payload_that_is_not_an_object():
    header = b64url(b'{"alg":"HS256","typ":"JWT"}')
    token = signed(header, b64url(b"[1, 2, 3]"), b"key")
    with pytest.raises(MalformedPayload):
        verify(token, b"key")


def test_codec_binds_secret():
    codec = TokenCodec("key")
    token = codec.issue({"username": "alice"})

    assert codec.verify(token) == {"username": "alice"}
    assert verify(token, b"key") == {"username": "alice"}
    with pytest.raises(SignatureMismatch):
        TokenCodec("other").verify(token)


def test_codec_repr_hides_secret():
    assert "hunter2" not in repr(TokenCodec("hunter2"))
