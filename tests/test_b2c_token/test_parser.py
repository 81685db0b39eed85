"""Tests for splitting and decoding compact tokens."""

import base64
import json

import pytest

from b2c_token.errors import MalformedToken
from b2c_token.parser import parse_token


def _segment(obj) -> str:
    raw = json.dumps(obj).encode() if not isinstance(obj, bytes) else obj
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


HEADER = _segment({"typ": "JWT", "alg": "RS256", "kid": "k1"})
PAYLOAD = _segment({"sub": "user1", "exp": 1700003600})


def test_parse_token_decodes_header_and_payload():
    decoded = parse_token(f"{HEADER}.{PAYLOAD}.sig")
    assert decoded.header == {"typ": "JWT", "alg": "RS256", "kid": "k1"}
    assert decoded.payload == {"sub": "user1", "exp": 1700003600}


def test_parse_token_does_not_validate_claims():
    payload = _segment({"sub": "user1", "exp": 1, "nbf": 9999999999, "aud": 5})
    assert parse_token(f"{HEADER}.{payload}.sig").payload["exp"] == 1


def test_parse_token_accepts_padded_segments():
    padded = base64.urlsafe_b64encode(json.dumps({"typ": "JWT"}).encode()).decode()
    assert parse_token(f"{padded}.{PAYLOAD}.sig").header == {"typ": "JWT"}


@pytest.mark.parametrize(
    "token",
    [
        "",
        "only-one-segment",
        f"{HEADER}.{PAYLOAD}",
        f"{HEADER}..sig",
        f"{HEADER}.{PAYLOAD}.",
        f"{HEADER}.{PAYLOAD}.sig.extra",
    ],
)
def test_parse_token_rejects_bad_segment_count(token):
    with pytest.raises(MalformedToken):
        parse_token(token)


@pytest.mark.parametrize(
    "header",
    [
        "",
        "!!!not-base64!!!",
        _segment(b"not json"),
        _segment(["a", "list"]),
    ],
)
def test_parse_token_rejects_undecodable_header(header):
    with pytest.raises(MalformedToken):
        parse_token(f"{header}.{PAYLOAD}.sig")


def test_parse_token_rejects_non_string():
    with pytest.raises(MalformedToken):
        parse_token(None)


def test_decoded_token_repr_hides_raw_token():
    decoded = parse_token(f"{HEADER}.{PAYLOAD}.secret-signature")
    assert "secret-signature" not in repr(decoded)


@pytest.mark.parametrize("payload", [_segment(b"not json"), _segment([1, 2])])
def test_parse_token_rejects_undecodable_payload(payload):
    with pytest.raises(MalformedToken):
        parse_token(f"{HEADER}.{payload}.sig")
