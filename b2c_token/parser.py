"""Split a compact JWT and decode its header and payload segments."""

from __future__ import annotations

import jwt

from .context import DecodedToken
from .errors import MalformedToken

# Decode only; signature and claims are verified later in the pipeline.
_UNVERIFIED = {
    "verify_signature": False,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


def parse_token(token: str) -> DecodedToken:
    """
    Parse ``header.payload.signature`` without verifying anything.

    Raises ``MalformedToken`` unless the token has exactly three segments with
    a non-empty payload and signature, and both header and payload decode to
    JSON objects.
    """
    if not isinstance(token, str):
        raise MalformedToken("Invalid token: expected a string")

    token = token.strip()
    segments = token.split(".")
    if len(segments) != 3:
        raise MalformedToken("Invalid token: expected 3 segments")
    if not segments[1] or not segments[2]:
        raise MalformedToken("Invalid token: empty payload or signature")

    try:
        header = jwt.get_unverified_header(token)
        payload = jwt.decode(token, options=dict(_UNVERIFIED))
    except jwt.InvalidTokenError as e:
        raise MalformedToken("Invalid token: header or payload is not base64url JSON") from e

    return DecodedToken(token=token, header=header, payload=payload)
