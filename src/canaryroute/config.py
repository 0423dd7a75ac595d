"""
Centralized configuration for canaryroute.

Uses Pydantic BaseSettings for environment variable integration
and validation. All configurable values should be defined here.

Configuration sources (in order of precedence):
1. Explicit constructor arguments
2. Environment variables (CANARYROUTE_*, plus AMBASSADOR_WEBHOOK_SECRET)
3. .env file
4. Default values

Example:
    from canaryroute.config import get_config

    config = get_config()
    print(config.webhook_timeout_seconds)  # From CANARYROUTE_WEBHOOK_TIMEOUT_SECONDS or default

    # Override at runtime
    config = get_config(kubernetes_namespace="rollouts")
"""

from __future__ import annotations

import os
from typing import Literal, Optional

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from canaryroute.contracts.timeouts import WEBHOOK_TIMEOUT_S
from canaryroute.contracts.types import WEBHOOK_SECRET_ENV_VAR


class CanaryRouteConfig(BaseSettings):
    """
    Central configuration for canaryroute.

    All settings can be overridden via environment variables
    prefixed with CANARYROUTE_. The webhook secret is also read from
    AMBASSADOR_WEBHOOK_SECRET so existing deployments keep working.

    Example:
        export AMBASSADOR_WEBHOOK_SECRET=s3cr3t
        export CANARYROUTE_LOG_LEVEL=debug
    """

    model_config = SettingsConfigDict(
        env_prefix="CANARYROUTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Webhook notification
    webhook_secret: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices(
            WEBHOOK_SECRET_ENV_VAR,
            "CANARYROUTE_WEBHOOK_SECRET",
        ),
        description="HMAC key for signing weight-change notifications",
    )
    webhook_timeout_seconds: float = Field(
        default=WEBHOOK_TIMEOUT_S,
        gt=0,
        description="Total timeout for a webhook delivery",
    )

    # Kubernetes
    kubernetes_namespace: str = Field(
        default="default",
        description="Default Kubernetes namespace",
    )
    kubeconfig: Optional[str] = Field(
        default=None,
        description="Path to kubeconfig file (auto-detected if not set)",
    )

    # Mapping store backend
    client_type: Literal["auto", "kubernetes", "memory"] = Field(
        default="auto",
        description="Mapping store backend (auto-detects if not set)",
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level for canaryroute",
    )

    @field_validator("kubeconfig")
    @classmethod
    def expand_path(cls, v: Optional[str]) -> Optional[str]:
        """Expand ~ and environment variables in paths."""
        if v is None:
            return v
        return os.path.expanduser(os.path.expandvars(v))

    @property
    def has_webhook_secret(self) -> bool:
        return bool(self.webhook_secret and self.webhook_secret.get_secret_value())


# Global singleton
_config: Optional[CanaryRouteConfig] = None


def get_config(**overrides) -> CanaryRouteConfig:
    """
    Get the global configuration instance.

    Creates a singleton on first call. Subsequent calls return
    the same instance unless overrides are provided.

    Args:
        **overrides: Override any config values

    Returns:
        CanaryRouteConfig instance
    """
    global _config

    if overrides or _config is None:
        _config = CanaryRouteConfig(**overrides)

    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None


def get_webhook_secret() -> str:
    """Get the configured webhook secret, or an empty string when unset."""
    secret = get_config().webhook_secret
    return secret.get_secret_value() if secret else ""
