"""Client configuration using Pydantic Settings.

Configuration is environment-aware:
- VERIFY_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Settings are read once and handed to the client at construction time; the
client never consults ambient module state after that.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


VERIFY_ENV = os.getenv("VERIFY_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(VERIFY_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None

# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


DEFAULT_BASE_URL = "https://verify.nezto.re"


def _build_verify_settings() -> "VerifySettings":
    """Build client settings from environment."""

    return VerifySettings()


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment."""

    return LogSettings()


class VerifySettings(BaseSettings):
    """Verification client configuration."""

    enable_logging: bool = Field(
        False,
        description="Emit debug logs for cache, rate limit and request events",
    )
    auth_token: str | None = Field(
        None,
        description="Optional authorization token, only needed for internal endpoints",
    )
    cache_ttl_seconds: float = Field(
        60,
        description="Time (in seconds) to cache lookup results for",
        gt=0,
    )
    cache_max_entries: int | None = Field(
        None,
        description="Upper bound on cached lookups (LRU eviction); None for unbounded",
        ge=1,
    )
    base_url: str = Field(
        DEFAULT_BASE_URL,
        description="Base URL of the verification API",
    )
    request_timeout_seconds: float | None = Field(
        None,
        description="Timeout applied by the HTTP client; None disables it",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="VERIFY_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration for the package logger."""

    level: str = Field(
        "DEBUG",
        description="Level applied when logging is enabled",
    )
    format: str = Field(
        "json",
        description="Output format: 'json' or 'plain'",
    )
    output: str = Field(
        "stdout",
        description="Destination: 'stdout' or 'file'",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output is 'file'",
    )
    max_bytes: int = Field(
        0,
        description="Rotate the log file at this size (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(
        3,
        description="Number of rotated files to keep",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Settings container composed from the domain-specific settings."""

    verify_env: str = VERIFY_ENV
    verify: VerifySettings = Field(default_factory=_build_verify_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Default settings instance used by the client factory
settings = Settings()
