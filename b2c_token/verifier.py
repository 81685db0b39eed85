"""
Key-set assembly and RS256 signature verification.

The JWKS document is turned into ``SigningKey`` entries once per fetch so a
malformed document fails at fetch time (``BadKeySetFormat``) rather than on
every token. Verification delegates to PyJWT, restricted to RS256; claim
checks are left to the validator so each failure keeps its own error kind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import jwt
from jwt import PyJWK

from .errors import BadKeySetFormat, SignatureInvalid

logger = logging.getLogger(__name__)

TOKEN_ALGORITHM = "RS256"

# Signature only; exp/nbf/aud/iss are checked by the validator in a fixed order.
_SIGNATURE_ONLY = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


@dataclass(frozen=True)
class SigningKey:
    kid: str | None
    x5t: str | None
    jwk: PyJWK


@dataclass(frozen=True)
class SigningKeySet:
    """Immutable snapshot of the provider's RSA signing keys."""

    keys: tuple[SigningKey, ...]

    def __len__(self) -> int:
        return len(self.keys)

    def candidates(self, header: dict[str, Any]) -> tuple[SigningKey, ...]:
        """
        Keys whose ``kid`` or ``x5t`` matches the token header.

        Falls back to every key when nothing matches, so a token is only
        rejected once no published key validates it.
        """
        kid = header.get("kid")
        x5t = header.get("x5t")
        matched = tuple(
            k for k in self.keys
            if (kid is not None and k.kid == kid) or (x5t is not None and k.x5t == x5t)
        )
        return matched or self.keys


def load_key_set(document: Any) -> SigningKeySet:
    """Build a ``SigningKeySet`` from a parsed JWKS document."""
    if not isinstance(document, dict) or not isinstance(document.get("keys"), list):
        raise BadKeySetFormat("JWKS document has no 'keys' list")

    keys: list[SigningKey] = []
    for key_dict in document["keys"]:
        if not isinstance(key_dict, dict) or key_dict.get("kty") != "RSA":
            continue
        try:
            jwk = PyJWK.from_dict(key_dict, algorithm=TOKEN_ALGORITHM)
        except (jwt.PyJWTError, ValueError) as e:
            logger.debug("Skipping unusable JWK kid=%s: %s", key_dict.get("kid"), type(e).__name__)
            continue
        keys.append(SigningKey(kid=key_dict.get("kid"), x5t=key_dict.get("x5t"), jwk=jwk))

    if not keys:
        raise BadKeySetFormat("JWKS document contains no usable RSA keys")
    return SigningKeySet(keys=tuple(keys))


def verify_signature(token: str, header: dict[str, Any], key_set: SigningKeySet) -> dict[str, Any]:
    """
    Verify ``token`` against ``key_set`` and return its payload.

    Raises ``SignatureInvalid`` if no candidate key validates the signature,
    the token uses an algorithm other than RS256, or it cannot be decoded.
    """
    last_error: Exception | None = None
    for signing_key in key_set.candidates(header):
        try:
            return jwt.decode(
                token,
                signing_key.jwk.key,
                algorithms=[TOKEN_ALGORITHM],
                options=dict(_SIGNATURE_ONLY),
            )
        except jwt.InvalidSignatureError as e:
            last_error = e
        except jwt.PyJWTError as e:
            logger.info("Token rejected before signature check: %s", type(e).__name__)
            raise SignatureInvalid("Invalid token: signature") from e

    raise SignatureInvalid("Invalid token: signature") from last_error
