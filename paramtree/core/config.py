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


# Requests per second each backend tolerates when no override is configured.
# The SSM free tier starts throttling somewhere below 4 requests per second.
DEFAULT_REQUESTS_PER_SECOND = {
    "ssm": 3,
    "local": 1000,
}


class StoreSettings(BaseSettings):
    """Parameter store backend configuration.

    Credentials for the SSM backend are resolved by boto3 (environment,
    shared config files, instance metadata) and are not part of these settings.
    """

    backend: Literal["ssm", "local"] = Field(
        "local",
        description="Backing store: 'ssm' (AWS Parameter Store) or 'local' (SQLite)",
    )
    requests_per_second: int | None = Field(
        None,
        description="Admission rate for store calls; defaults depend on the backend",
        ge=1,
    )
    page_size: int = Field(
        10,
        description="Parameters requested per listing page (SSM allows at most 10)",
        ge=1,
        le=10,
    )
    region: str | None = Field(
        None,
        description="AWS region for the SSM backend (falls back to the boto3 default)",
    )
    endpoint_url: str | None = Field(
        None,
        description="Custom SSM endpoint, e.g. a LocalStack URL",
    )
    database_url: str = Field(
        "sqlite+aiosqlite:///./parameters.db",
        description="SQLAlchemy URL for the local backend",
    )
    secure: bool | None = Field(
        None,
        description="Store values as SecureString; defaults to true for ssm, false for local",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        case_sensitive=False,
    )

    @property
    def effective_requests_per_second(self) -> int:
        """Configured admission rate, or the backend default."""
        if self.requests_per_second is not None:
            return self.requests_per_second
        return DEFAULT_REQUESTS_PER_SECOND[self.backend]

    @property
    def effective_secure(self) -> bool:
        """Whether writes should request encrypted storage."""
        if self.secure is not None:
            return self.secure
        return self.backend == "ssm"


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field(
        "INFO",
        description="Root log level (DEBUG, INFO, WARNING, ...)",
    )
    format: Literal["json", "plain"] = Field(
        "json",
        description="Log line format",
    )
    output: Literal["stdout", "file"] = Field(
        "stdout",
        description="Log destination",
    )
    file_path: str | None = Field(
        None,
        description="Log file path when output is 'file'",
    )
    max_bytes: int = Field(
        0,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(
        5,
        description="Rotated log files to keep",
        ge=0,
    )
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


def _build_store_settings() -> StoreSettings:
    """Build store settings from environment.

    Pydantic Settings (v2) can populate values from environment variables.
    However, static type checkers often treat required fields as required
    constructor arguments, which is not how BaseSettings is intended to be used.
    """

    return StoreSettings()  # type: ignore[call-arg]


def _build_app_settings() -> AppSettings:
    """Build app settings from environment.

    See _build_store_settings() for rationale about the type ignore.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> LogSettings:
    return LogSettings()  # type: ignore[call-arg]


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.

    Environments:
    - development: Local development, SQLite backend by default
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
