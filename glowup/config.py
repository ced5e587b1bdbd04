"""Configuration helpers for the GlowUp backend."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Mapping

from dotenv import load_dotenv

PLACEHOLDER_API_KEY = "sk-ant-REDACTED"

DEFAULT_MODEL = "claude-3-5-sonnet-latest"
DEFAULT_API_BASE_URL = "https://api.anthropic.com"
DEFAULT_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_REQUEST_TIMEOUT = 60.0

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

load_dotenv(override=False)


@dataclass(frozen=True)
class Settings:
    """Settings container for the model endpoint and the HTTP surface.

    ``anthropic_api_key`` only seeds the credential of new sessions; the
    generation pipeline always reads the credential from the session at
    call time.
    """

    anthropic_api_key: str | None = None
    model: str = DEFAULT_MODEL
    api_base_url: str = DEFAULT_API_BASE_URL
    anthropic_version: str = DEFAULT_ANTHROPIC_VERSION
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = "INFO"
    json_logs: bool = True
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))

    @property
    def has_default_credential(self) -> bool:
        """True when a usable API key is configured in the environment."""

        return is_usable_credential(self.anthropic_api_key)


def is_usable_credential(credential: str | None) -> bool:
    """Return False for missing, blank or placeholder credentials."""

    if credential is None:
        return False
    stripped = credential.strip()
    return bool(stripped) and stripped != PLACEHOLDER_API_KEY


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _parse_float(raw: str | None, default: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_origins(raw: str | None) -> List[str]:
    if raw:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        if origins:
            return origins
    return list(DEFAULT_ALLOWED_ORIGINS)


def settings_from_environ(environ: Mapping[str, str]) -> Settings:
    """Build settings from an environment mapping."""

    api_key = environ.get("ANTHROPIC_API_KEY")
    return Settings(
        anthropic_api_key=api_key if is_usable_credential(api_key) else None,
        model=environ.get("GLOWUP_MODEL") or DEFAULT_MODEL,
        api_base_url=environ.get("GLOWUP_API_BASE_URL") or DEFAULT_API_BASE_URL,
        anthropic_version=environ.get("GLOWUP_ANTHROPIC_VERSION") or DEFAULT_ANTHROPIC_VERSION,
        request_timeout=_parse_float(environ.get("GLOWUP_REQUEST_TIMEOUT"), DEFAULT_REQUEST_TIMEOUT),
        log_level=(environ.get("GLOWUP_LOG_LEVEL") or "INFO").upper(),
        json_logs=_parse_bool(environ.get("GLOWUP_JSON_LOGS"), True),
        allowed_origins=_parse_origins(environ.get("GLOWUP_ALLOWED_ORIGINS")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read environment variables and return cached settings."""

    return settings_from_environ(os.environ)
