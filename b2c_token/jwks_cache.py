"""
Discovery + JWKS fetch with a TTL cache.

Background for newcomers:
    B2C signs every ID token with a private RSA key. To check the signature
    we need the matching **public** key. B2C does not publish the key set at
    a fixed URL; instead each user flow (policy) has an OpenID discovery
    document, and its ``jwks_uri`` field points at the current key set. So a
    refresh is two GETs: discovery document, then key set.

    Keys are cached for ``ttl_seconds``. There is no background refresh: the
    first call after expiry refetches. A failed refetch is raised to the
    caller and the old keys stay cached; they are not used as a fallback.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any

import requests

from .errors import (
    BadKeySetFormat,
    CertsFetchFailed,
    ConfigFetchFailed,
    JwksUriMissing,
    KeyFetchTimeout,
    ValidationError,
)
from .verifier import SigningKeySet, load_key_set

logger = logging.getLogger(__name__)


class B2CKeyProvider:
    """
    In-memory cache of one tenant/policy's signing keys.

    A lock guards the whole check-then-refresh sequence, so concurrent callers
    share one in-flight fetch instead of each hitting the network.
    """

    def __init__(
        self,
        config_uri: str,
        ttl_seconds: int,
        *,
        timeout: float = 10.0,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._config_uri = config_uri
        self._ttl = ttl_seconds
        self._timeout = timeout
        self._clock = clock or time.monotonic
        self._keys: SigningKeySet | None = None
        self._fetched_at: float = 0.0
        self._lock = threading.Lock()

    def _get(self, url: str, failure: type[ValidationError]) -> requests.Response:
        try:
            resp = requests.get(url, timeout=self._timeout)
        except requests.Timeout as e:
            logger.warning("Timed out fetching %s", url)
            raise KeyFetchTimeout(url) from e
        except requests.RequestException as e:
            logger.warning("Request to %s failed: %s", url, type(e).__name__)
            raise failure(f"Unable to fetch {url}") from e

        if not 200 <= resp.status_code < 300:
            logger.warning("GET %s returned status=%s", url, resp.status_code)
            raise failure(f"Unable to fetch {url}: status {resp.status_code}")
        return resp

    def _fetch_config(self) -> dict[str, Any]:
        resp = self._get(self._config_uri, ConfigFetchFailed)
        try:
            body = resp.json()
        except ValueError as e:
            raise ConfigFetchFailed("OpenID configuration is not JSON") from e
        if not isinstance(body, dict):
            raise ConfigFetchFailed("OpenID configuration is not a JSON object")
        return body

    def _fetch_keys(self) -> SigningKeySet:
        jwks_uri = self._fetch_config().get("jwks_uri")
        if not isinstance(jwks_uri, str) or not jwks_uri:
            raise JwksUriMissing("OpenID configuration has no jwks_uri")

        resp = self._get(jwks_uri, CertsFetchFailed)
        try:
            document = resp.json()
        except ValueError as e:
            raise BadKeySetFormat("JWKS document is not JSON") from e
        return load_key_set(document)

    def _refresh_locked(self) -> SigningKeySet:
        keys = self._fetch_keys()
        self._keys = keys
        self._fetched_at = self._clock()
        logger.debug("JWKS cache refreshed uri=%s keys=%d", self._config_uri, len(keys))
        return keys

    def _is_fresh(self) -> bool:
        return self._keys is not None and (self._clock() - self._fetched_at) < self._ttl

    def get_signing_keys(self) -> SigningKeySet:
        """Return cached keys, refetching only when the TTL has elapsed."""
        with self._lock:
            if self._is_fresh():
                return self._keys
            return self._refresh_locked()

    def refresh(self) -> SigningKeySet:
        """Force-refresh the cache regardless of TTL."""
        with self._lock:
            return self._refresh_locked()
