"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

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
if _env_file and not os.getenv("TESTING"):
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class GitHubSettings(BaseSettings):
    """Upstream GitHub REST API configuration.

    The token is optional here so that importing settings never fails;
    the client factory refuses to build a client without one.
    """

    token: str | None = Field(
        None,
        description="Personal access token used as a bearer token",
    )
    api_base_url: str = Field(
        "https://api.github.com",
        description="Base URL of the GitHub REST API",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Per-request timeout in seconds",
        gt=0,
    )
    per_page: int = Field(
        100,
        description="Number of repositories/organizations requested per listing",
        ge=1,
        le=100,
    )

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_",
        case_sensitive=False,
    )


class ServerSettings(BaseSettings):
    """HTTP server bootstrap configuration."""

    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(8080, description="Bind port", ge=1, le=65535)
    scheme: Literal["http", "https"] = Field(
        "http",
        description="Serve plaintext HTTP or HTTPS",
    )
    cert_file: str | None = Field(
        None,
        description="TLS certificate file (required when scheme is https)",
    )
    key_file: str | None = Field(
        None,
        description="TLS private key file (required when scheme is https)",
    )
    path: str = Field("/stats", description="Route path of the stats endpoint")

    model_config = SettingsConfigDict(
        env_prefix="SERVER_",
        case_sensitive=False,
    )


class StatsSettings(BaseSettings):
    """Cache and rate limit configuration for the stats endpoint."""

    cache_ttl_seconds: float = Field(
        3600,
        description="Time-to-live of cached statistics in seconds",
        gt=0,
    )
    cache_max_entries: int | None = Field(
        None,
        description="Maximum number of cached subjects (None for unlimited)",
        ge=1,
    )
    rate_limit_requests: int = Field(
        10,
        description="Maximum number of requests allowed per window",
        ge=1,
    )
    rate_limit_window_seconds: float = Field(
        60,
        description="Rate limit window size in seconds",
        gt=0,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    upstream_deadline_seconds: float | None = Field(
        30.0,
        description="Deadline for the whole upstream fetch sequence (None disables it)",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="STATS_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: Literal["json", "plain"] = Field("json", description="Log line format")
    output: Literal["stdout", "file"] = Field("stdout", description="Log destination")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Number of rotated files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Each group is built via default_factory so env loading works for
    nested settings.
    """

    app_env: str = APP_ENV
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    stats: StatsSettings = Field(default_factory=StatsSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


settings = Settings()
