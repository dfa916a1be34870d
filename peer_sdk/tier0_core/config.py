"""
peer_sdk.tier0_core.config
────────────────────────────
Typed configuration with env layering. Reads from .env → environment
variables. All fields are typed via Pydantic and validated once at startup.

Minimal stack: pydantic-settings + python-dotenv
Configure via: KUBERNETES_URL, KUBERNETES_NAMESPACE, KUBERNETES_ENABLED,
               KUBERNETES_REQUEST_TIMEOUT, PEER_HOSTNAME_ENV
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from peer_sdk.tier0_core.errors import ConfigurationError


class PeerConfig(BaseSettings):
    """
    Peer discovery configuration. Captured once at process start and never
    mutated afterwards.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # ── Kubernetes ────────────────────────────────────────────────────────────
    # Unset means in-cluster auto-configuration. Set it to talk to a forwarded
    # API server, e.g. `kubectl proxy` on http://localhost:8001.
    kubernetes_url: str | None = Field(default=None, alias="KUBERNETES_URL")
    namespace: str | None = Field(default=None, alias="KUBERNETES_NAMESPACE")
    kubernetes_enabled: bool = Field(default=True, alias="KUBERNETES_ENABLED")
    request_timeout: float | None = Field(
        default=None, alias="KUBERNETES_REQUEST_TIMEOUT"
    )

    # ── Hostname ──────────────────────────────────────────────────────────────
    hostname_env: str = Field(default="HOSTNAME", alias="PEER_HOSTNAME_ENV")

    @field_validator("kubernetes_url", "namespace")
    @classmethod
    def blank_is_unset(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"request_timeout must be positive, got {v!r}")
        return v


@lru_cache(maxsize=1)
def get_config() -> PeerConfig:
    """
    Return the singleton peer config. Cached after first call.
    Call _reset_config() in tests to pick up new env vars.

    Raises:
        ConfigurationError: an environment value failed validation.
    """
    try:
        return PeerConfig()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid peer discovery configuration: {exc}") from exc


def _reset_config() -> None:
    """For tests: clear the config cache."""
    get_config.cache_clear()
