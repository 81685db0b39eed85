"""
Error kinds raised while validating a B2C ID token.

Every failure is a ``ValidationError`` subclass so callers can tell a network
problem (``ConfigFetchFailed``, ``CertsFetchFailed``, ``KeyFetchTimeout``)
apart from a bad token (``SignatureInvalid``, ``InvalidAudience``...) or an
expired one (``TokenExpired``). Messages never contain the token.
"""

from __future__ import annotations


class ValidationError(Exception):
    """Raised when token validation fails. Do not log the token."""

    code = "validation_error"


class MalformedToken(ValidationError):
    code = "malformed_token"


class BadHeaderFormat(ValidationError):
    code = "bad_header_format"


class BadPayloadFormat(ValidationError):
    code = "bad_payload_format"


class ConfigFetchFailed(ValidationError):
    code = "config_fetch_failed"


class JwksUriMissing(ValidationError):
    code = "jwks_uri_missing"


class CertsFetchFailed(ValidationError):
    code = "certs_fetch_failed"


class BadKeySetFormat(ValidationError):
    code = "bad_key_set_format"


class KeyFetchTimeout(ValidationError):
    """The config or JWKS endpoint did not answer within the request timeout."""

    code = "key_fetch_timeout"

    def __init__(self, url: str) -> None:
        super().__init__(f"Timed out fetching {url}")
        self.url = url


class SignatureInvalid(ValidationError):
    code = "signature_invalid"


class InvalidAudience(ValidationError):
    code = "invalid_audience"


class InvalidIssuer(ValidationError):
    code = "invalid_issuer"


class TokenExpired(ValidationError):
    code = "token_expired"


class TokenNotYetValid(ValidationError):
    code = "token_not_yet_valid"
