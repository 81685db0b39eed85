from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class B2CSettings(BaseSettings):
    """
    Validator settings.

    Notes:
    - Every field can be set with a ``B2C_`` prefixed env var, e.g. ``B2C_TENANT_NAME``.
    - Identity fields default to empty; ``B2CConfig.from_environ`` rejects them if unset.
    """

    model_config = SettingsConfigDict(env_prefix="B2C_", extra="ignore")

    tenant_name: str = ""
    tenant_id: str = ""
    app_registration_id: str = ""
    policy_name: str = ""
    cache_ttl_seconds: int = 3600
    http_timeout_seconds: float = 10.0
    log_level: str = "INFO"


@lru_cache
def get_settings() -> B2CSettings:
    return B2CSettings()
