"""
Pytest fixtures for the test suite.

Tokens are signed with a real RSA key generated once per session; the
discovery and JWKS endpoints are served by patching ``requests.get`` in
``b2c_token.jwks_cache`` so no test touches the network.
"""
from __future__ import annotations

from unittest.mock import MagicMock, patch

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from b2c_token.config import B2CConfig
from b2c_token.validator import B2CTokenValidator


NOW = 1_700_000_000
JWKS_URI = "https://contoso.b2clogin.com/contoso.onmicrosoft.com/b2c_1_signup/discovery/v2.0/keys"


class FakeClock:
    """Callable clock returning a settable epoch time."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _response(status: int = 200, body=None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    return resp


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_private_key():
    """A key that is never published in the JWKS."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def jwks(rsa_private_key):
    jwk = RSAAlgorithm.to_jwk(rsa_private_key.public_key(), as_dict=True)
    jwk.update({"kid": "k1", "x5t": "thumb-1", "use": "sig"})
    return {"keys": [jwk]}


@pytest.fixture
def config() -> B2CConfig:
    return B2CConfig(
        tenant_name="contoso",
        tenant_id="tid-1",
        app_registration_id="abc123",
        policy_name="B2C_1_signup",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_clock() -> FakeClock:
    """Stand-in for the monotonic clock that times key-cache expiry."""
    return FakeClock(0)


@pytest.fixture
def validator(config, clock, cache_clock) -> B2CTokenValidator:
    return B2CTokenValidator(config=config, clock=clock, cache_clock=cache_clock)


@pytest.fixture
def make_response():
    """Factory for fake ``requests.Response`` objects."""
    return _response


@pytest.fixture
def endpoints(config, jwks):
    """
    Patch ``requests.get`` with a URL -> response table.

    Tests replace entries in ``endpoints.responses`` to simulate failures;
    ``endpoints.call_count`` counts GETs.
    """
    responses = {
        config.config_uri: _response(
            body={"issuer": "https://contoso.b2clogin.com/tid-1/v2.0/", "jwks_uri": JWKS_URI}
        ),
        JWKS_URI: _response(body=jwks),
    }
    with patch("b2c_token.jwks_cache.requests.get") as mock_get:
        mock_get.side_effect = lambda url, **kwargs: responses[url]
        mock_get.responses = responses
        yield mock_get


@pytest.fixture
def claims(clock) -> dict:
    now = int(clock())
    return {
        "aud": "abc123",
        "iss": "https://contoso.b2clogin.com/tid-1/v2.0",
        "sub": "user1",
        "iat": now - 10,
        "nbf": now - 10,
        "exp": now + 3600,
    }


@pytest.fixture
def make_token(rsa_private_key, claims):
    """
    Mint an RS256 token signed with the published key.

    Keyword overrides replace claims; a value of ``None`` drops the claim.
    """

    def _make(*, headers: dict | None = None, key=None, algorithm: str = "RS256", **overrides) -> str:
        payload = {**claims, **overrides}
        payload = {k: v for k, v in payload.items() if v is not None}
        return jwt.encode(
            payload,
            key if key is not None else rsa_private_key,
            algorithm=algorithm,
            headers={"kid": "k1"} if headers is None else headers,
        )

    return _make


@pytest.fixture
def jwks_uri() -> str:
    return JWKS_URI
