"""
Standalone validator for Azure AD B2C ID tokens.

Build one validator per app registration with ``new_validator(...)`` (or
``B2CTokenValidator(B2CConfig(...))``) and call ``check(token)`` to get the
verified claims. Every failure is a ``ValidationError`` subclass.
"""

from .config import B2CConfig
from .context import DecodedToken
from .errors import (
    BadHeaderFormat,
    BadKeySetFormat,
    BadPayloadFormat,
    CertsFetchFailed,
    ConfigFetchFailed,
    InvalidAudience,
    InvalidIssuer,
    JwksUriMissing,
    KeyFetchTimeout,
    MalformedToken,
    SignatureInvalid,
    TokenExpired,
    TokenNotYetValid,
    ValidationError,
)
from .logging_config import configure_logging
from .parser import parse_token
from .validator import B2CTokenValidator, check_token, new_validator

__all__ = [
    "B2CConfig",
    "B2CTokenValidator",
    "DecodedToken",
    "ValidationError",
    "MalformedToken",
    "BadHeaderFormat",
    "BadPayloadFormat",
    "ConfigFetchFailed",
    "JwksUriMissing",
    "CertsFetchFailed",
    "BadKeySetFormat",
    "KeyFetchTimeout",
    "SignatureInvalid",
    "InvalidAudience",
    "InvalidIssuer",
    "TokenExpired",
    "TokenNotYetValid",
    "check_token",
    "configure_logging",
    "new_validator",
    "parse_token",
]
