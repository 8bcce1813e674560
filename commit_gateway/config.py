"""Process-wide configuration for the commit gateway."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Credentials and defaults shared by every provider client."""

    openai_api_key: str = ""
    gemini_api_key: str = ""
    default_provider: str = "gemini"


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Runtime configuration for the gateway, read once at startup."""

    env: str = "production"
    port: int = 80
    allowed_ips: str = "::1"
    log_level: str = "INFO"
    shutdown_grace_seconds: int = 30
    upstream_timeout_seconds: float = 60.0
    providers: ProviderConfig = field(default_factory=ProviderConfig)


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc


def _get_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc


def load_config() -> ServiceConfig:
    return ServiceConfig(
        env=os.getenv("APP_ENV", "production"),
        port=_get_int("APP_PORT", 80),
        allowed_ips=os.getenv("APP_IPS", "::1"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        shutdown_grace_seconds=_get_int("SHUTDOWN_GRACE_SECONDS", 30),
        upstream_timeout_seconds=_get_float("UPSTREAM_TIMEOUT_SECONDS", 60.0),
        providers=ProviderConfig(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            default_provider=os.getenv("LLM_PROVIDER", "gemini").lower(),
        ),
    )
