"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Settings are read once at import time. Components receive the values they need
through their constructors instead of reading the environment per request.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first.
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


def _build_upstream_settings() -> "UpstreamSettings":
    return UpstreamSettings()


def _build_app_settings() -> "AppSettings":
    return AppSettings()


def _build_log_settings() -> "LogSettings":
    return LogSettings()


class UpstreamSettings(BaseSettings):
    """Chat-completion upstream (Perplexity) configuration.

    The API key is optional on purpose: without it the service still starts
    and ``/api/chat`` answers with the degraded fallback payload.
    """

    api_key: str | None = Field(
        None,
        description="Perplexity API key (PERPLEXITY_API_KEY)",
    )
    base_url: str = Field(
        "https://api.perplexity.ai",
        description="Base URL of the OpenAI-compatible chat completions API",
    )
    timeout_seconds: float = Field(
        30.0,
        description="Upper bound for a single upstream call in seconds",
        gt=0,
    )
    default_model: str = Field(
        "sonar-pro",
        description="Model used when the caller does not specify one",
    )
    default_max_tokens: int = Field(
        800,
        description="max_tokens used when the caller does not specify one",
        ge=1,
    )
    max_tokens_cap: int = Field(
        1000,
        description="Hard ceiling applied to caller-provided max_tokens",
        ge=1,
    )
    default_temperature: float = Field(0.7, description="Default sampling temperature")
    default_top_p: float = Field(0.9, description="Default nucleus sampling value")
    search_recency_filter: str = Field(
        "month",
        description="Search recency window forced on every upstream request",
    )
    user_agent: str = Field(
        "PTTeknologiMaju-Proxy/1.0",
        description="User-Agent header sent to the upstream",
    )

    model_config = SettingsConfigDict(
        env_prefix="PERPLEXITY_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    environment: str = Field(
        APP_ENV,
        description="Deployment environment name",
    )
    service_name: str = Field(
        "PT. Teknologi Maju Indonesia API Proxy",
        description="Service name reported by the health endpoint",
    )
    host: str = Field("0.0.0.0", description="Bind address for the HTTP server")
    port: int = Field(3000, description="Bind port for the HTTP server")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins (JSON list in the environment)",
    )
    cors_allow_credentials: bool = Field(
        True,
        description="Whether CORS responses allow credentials",
    )
    static_dir: str | None = Field(
        "public",
        description="Directory with static frontend files mounted at '/' when present",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on the chat endpoint",
    )
    rate_limit_requests: int = Field(
        30,
        description="Maximum number of requests allowed per window (per client)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        60,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_max_clients: int | None = Field(
        10000,
        description="Upper bound on tracked client windows (None for unbounded)",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="'json' or 'plain'")
    output: str = Field("stdout", description="'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.

    Environments:
    - development: Local development
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    upstream: UpstreamSettings = Field(default_factory=_build_upstream_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
