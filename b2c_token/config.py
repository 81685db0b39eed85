"""Validator configuration. Identity values come from the caller or the environment."""

from __future__ import annotations

from dataclasses import dataclass

from .settings import B2CSettings, get_settings

DEFAULT_CACHE_TTL_SECONDS = 3600
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class B2CConfig:
    """
    Azure AD B2C configuration for one app registration and one user flow.

    Fields:
        tenant_name: B2C tenant name, e.g. ``contoso`` for ``contoso.onmicrosoft.com``.
        tenant_id: Tenant (directory) ID; must match the issuer exactly.
        app_registration_id: Application (client) ID; used as the expected audience.
        policy_name: User flow / custom policy, e.g. ``B2C_1_signup``.
        expiry: Seconds to keep fetched signing keys before refetching (default 3600).
        http_timeout_seconds: Timeout for each discovery/JWKS request (default 10).
    """

    tenant_name: str
    tenant_id: str
    app_registration_id: str
    policy_name: str
    expiry: int = DEFAULT_CACHE_TTL_SECONDS
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS

    @property
    def config_uri(self) -> str:
        # https://learn.microsoft.com/azure/active-directory-b2c/tokens-overview
        return (
            f"https://{self.tenant_name}.b2clogin.com/{self.tenant_name}.onmicrosoft.com"
            f"/{self.policy_name}/v2.0/.well-known/openid-configuration"
        )

    @classmethod
    def from_environ(cls, settings: B2CSettings | None = None) -> B2CConfig:
        s = settings or get_settings()
        missing = [
            f"B2C_{name.upper()}"
            for name in ("tenant_name", "tenant_id", "app_registration_id", "policy_name")
            if not getattr(s, name).strip()
        ]
        if missing:
            raise ValueError(f"{', '.join(missing)} must be set")
        return cls(
            tenant_name=s.tenant_name.strip(),
            tenant_id=s.tenant_id.strip(),
            app_registration_id=s.app_registration_id.strip(),
            policy_name=s.policy_name.strip(),
            expiry=s.cache_ttl_seconds,
            http_timeout_seconds=s.http_timeout_seconds,
        )
