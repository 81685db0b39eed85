"""Decoded (not yet verified) view of an ID token."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DecodedToken:
    """
    Header and payload of a single token, as produced by ``parse_token``.

    Nothing here is trusted until the signature and claims are verified;
    the validator keeps it only for the duration of one ``check`` call.
    """

    token: str = field(repr=False)
    """Raw compact token; kept for signature verification, never logged."""

    header: dict[str, Any]
    """JOSE header, e.g. ``{"typ": "JWT", "alg": "RS256", "kid": "..."}``."""

    payload: dict[str, Any]
    """Claims as sent by the issuer."""
