"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
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

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_store_settings() -> "StoreSettings":
    """Build store settings from environment.

    Pydantic Settings (v2) can populate values from environment variables.
    However, static type checkers often treat required fields as required
    constructor arguments, which is not how BaseSettings is intended to be used.
    """

    return StoreSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    See _build_store_settings() for rationale about the type ignore.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class StoreSettings(BaseSettings):
    """Hosted data store configuration.

    URL and key are optional on purpose: when they are missing the app still
    starts, and every store-backed request answers with a configuration error.
    """

    backend: str = Field(
        "postgrest",
        description="Store backend: 'postgrest' (hosted REST store) or 'memory'",
    )
    url: str | None = Field(
        None,
        description="Base URL of the hosted store (e.g., https://xyz.supabase.co)",
    )
    api_key: str | None = Field(
        None,
        description="Access key sent as apikey/Bearer token to the hosted store",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Request timeout in seconds for store calls",
        gt=0,
    )
    notes_table: str = Field("love_wall", description="Table holding notes")
    comments_table: str = Field(
        "love_wall_comments",
        description="Table holding comments",
    )
    rate_limits_table: str = Field(
        "love_wall_rate_limits",
        description="Table holding one rate limit row per client IP",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    note_rate_limit_window_ms: int = Field(
        60_000,
        description="Fixed rate limit window for posting notes, in milliseconds",
        ge=1,
    )
    note_rate_limit_max_requests: int = Field(
        5,
        description="Maximum accepted note posts per window (per client IP)",
        ge=1,
    )
    comment_rate_limit_window_ms: int = Field(
        60_000,
        description="Fixed rate limit window for posting comments, in milliseconds",
        ge=1,
    )
    comment_rate_limit_max_requests: int = Field(
        10,
        description="Maximum accepted comment posts per window (per client IP)",
        ge=1,
    )

    max_name_chars: int = Field(36, description="Maximum poster name length", ge=1)
    max_message_chars: int = Field(240, description="Maximum note message length", ge=1)
    max_comment_chars: int = Field(200, description="Maximum comment length", ge=1)

    default_emoji: str = Field("\U0001F497", description="Emoji used when a note has none")
    default_color: str = Field("rose", description="Card color used when a note has none")

    notes_list_limit: int = Field(100, description="Notes returned by the list endpoint", ge=1)
    comments_list_limit: int = Field(50, description="Comments returned per note", ge=1)

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
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.

    Environments:
    - development: Local development (DEBUG=true)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    store: StoreSettings = Field(default_factory=_build_store_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
