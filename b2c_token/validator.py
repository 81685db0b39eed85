"""
Validate Azure AD B2C ID tokens and return their claims.

Background for newcomers:
    After sign-in, B2C hands the client an ID token: a JWT signed with one of
    the tenant's RSA keys. Before we trust **anything** in it we must:

    1. Check the **header** says it is an RS256 JWT and names its key.
    2. Verify the **signature** against the keys B2C currently publishes.
    3. Check the **payload** carries the standard claims and an issuer URL
       of the B2C shape.
    4. Check the **audience** (``aud``) is our app registration.
    5. Check it hasn't **expired** (``exp``) and isn't used before its start
       time (``nbf``).
    6. Check the **issuer** (``iss``) names our tenant.

    Each step raises its own ``ValidationError`` subclass and stops the
    pipeline, so callers can tell "expired" apart from "forged" apart from
    "B2C unreachable".
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Mapping
from typing import Any

from .config import DEFAULT_CACHE_TTL_SECONDS, DEFAULT_HTTP_TIMEOUT_SECONDS, B2CConfig
from .errors import (
    BadHeaderFormat,
    BadPayloadFormat,
    InvalidAudience,
    InvalidIssuer,
    TokenExpired,
    TokenNotYetValid,
    ValidationError,
)
from .jwks_cache import B2CKeyProvider
from .parser import parse_token
from .verifier import TOKEN_ALGORITHM, verify_signature

logger = logging.getLogger(__name__)

TOKEN_TYPE = "JWT"
REQUIRED_CLAIMS = ("aud", "exp", "nbf", "sub", "iss", "iat")

# Captures (tenant name, tenant id); B2C issuers may carry a trailing slash.
ISSUER_PATTERN = re.compile(r"https://(.+)\.b2clogin\.com/(.+)/v2\.0/?")


def _is_timestamp(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class B2CTokenValidator:
    """
    Validates B2C ID tokens for one tenant, app registration and policy.

    Holds the signing-key cache, so reuse one instance for many tokens.
    ``clock`` returns epoch seconds for the token time window. ``cache_clock``
    times key-cache expiry and defaults to ``time.monotonic`` so wall-clock
    jumps cannot stretch the TTL. Tests pass fakes for both.
    """

    def __init__(
        self,
        config: B2CConfig | None = None,
        *,
        clock: Callable[[], float] | None = None,
        cache_clock: Callable[[], float] | None = None,
    ) -> None:
        self._config = config or B2CConfig.from_environ()
        self._clock = clock or time.time
        self._keys = B2CKeyProvider(
            self._config.config_uri,
            self._config.expiry,
            timeout=self._config.http_timeout_seconds,
            clock=cache_clock,
        )

    @property
    def config(self) -> B2CConfig:
        return self._config

    def check(self, id_token: str) -> dict[str, Any]:
        """
        Validate the ID token and return its decoded payload.

        All claims are returned, including ones not checked here. Raises a
        ``ValidationError`` subclass on the first failed step.
        """
        try:
            decoded = parse_token(id_token)
            self.verify_header(decoded.header)
            key_set = self._keys.get_signing_keys()
            payload = verify_signature(decoded.token, decoded.header, key_set)
            self.verify_payload(payload)
        except ValidationError as e:
            logger.info("Token rejected: %s", e.code)
            raise
        return payload

    def verify_header(self, header: Mapping[str, Any]) -> None:
        valid = header.get("typ") == TOKEN_TYPE and header.get("alg") == TOKEN_ALGORITHM
        valid = valid and not (header.get("kid") is None and header.get("x5t") is None)
        if not valid:
            raise BadHeaderFormat("Invalid token header: expected typ=JWT, alg=RS256 and kid or x5t")

    def verify_payload(self, payload: Mapping[str, Any]) -> None:
        """Check claims in a fixed order; the first failure wins."""
        # Basic format check
        missing = [name for name in REQUIRED_CLAIMS if payload.get(name) is None]
        if missing:
            raise BadPayloadFormat(f"Invalid token payload: missing {', '.join(missing)}")
        iss = payload["iss"]
        iss_match = ISSUER_PATTERN.fullmatch(iss) if isinstance(iss, str) else None
        if iss_match is None:
            raise BadPayloadFormat("Invalid token payload: unexpected issuer format")
        if not (_is_timestamp(payload["exp"]) and _is_timestamp(payload["nbf"])):
            raise BadPayloadFormat("Invalid token payload: exp and nbf must be numeric")

        if payload["aud"] != self._config.app_registration_id:
            raise InvalidAudience("Invalid token: audience")

        now = int(self._clock())
        if payload["exp"] < now:
            raise TokenExpired("Token expired")
        if payload["nbf"] > now:
            raise TokenNotYetValid("Token not yet valid")

        tenant_name, tenant_id = iss_match.group(1), iss_match.group(2)
        if tenant_name.lower() != self._config.tenant_name.lower() or tenant_id != self._config.tenant_id:
            raise InvalidIssuer("Invalid token: issuer")


def new_validator(
    tenant_name: str,
    tenant_id: str,
    app_registration_id: str,
    policy_name: str,
    options: Mapping[str, Any] | None = None,
    *,
    clock: Callable[[], float] | None = None,
    cache_clock: Callable[[], float] | None = None,
) -> B2CTokenValidator:
    """
    Build a validator from positional identity values.

    ``options`` recognizes ``expiry`` (key-cache TTL in seconds, default 3600)
    and ``timeout`` (per-request HTTP timeout in seconds, default 10).
    """
    options = options or {}
    config = B2CConfig(
        tenant_name=tenant_name,
        tenant_id=tenant_id,
        app_registration_id=app_registration_id,
        policy_name=policy_name,
        expiry=int(options.get("expiry", DEFAULT_CACHE_TTL_SECONDS)),
        http_timeout_seconds=float(options.get("timeout", DEFAULT_HTTP_TIMEOUT_SECONDS)),
    )
    return B2CTokenValidator(config, clock=clock, cache_clock=cache_clock)


def check_token(token: str, config: B2CConfig | None = None) -> dict[str, Any]:
    """
    Convenience function: validate an ID token and return its claims.

    Creates a ``B2CTokenValidator`` (loading config from the environment if
    ``config`` is None) and delegates to ``check``. The key cache dies with
    the validator, so keep an instance instead when validating many tokens.
    """
    validator = B2CTokenValidator(config=config)
    return validator.check(token)
