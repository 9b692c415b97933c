# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import get_settings
#   settings = get_settings()
#   print(settings.DATABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# The Settings class validates all values at startup, catching configuration
# errors early rather than at runtime. load_settings() turns a validation
# failure into readable log lines and a non-zero exit.
# =============================================================================

import logging
import sys
from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "test", "production"] = Field(
        default="development",
        description="Current environment"
    )

    APP_NAME: str = Field(
        default="quickapi",
        description="Service name reported by /info"
    )

    APP_VERSION: str = Field(
        default="1.0.0",
        description="Service version reported by /info and the OpenAPI document"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    LOG_LEVEL: Literal["critical", "error", "warning", "info", "debug"] = Field(
        default="info",
        description="Minimum log level"
    )

    # -------------------------------------------------------------------------
    # Database
    # -------------------------------------------------------------------------

    DATABASE_URL: str = Field(
        default="sqlite:///./quickapi.db",
        description="SQLAlchemy database URL"
    )

    # -------------------------------------------------------------------------
    # CORS
    # -------------------------------------------------------------------------

    # Comma-separated string that gets parsed; "*" allows any origin
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------

    RATE_LIMIT_WINDOW_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Sliding window length for rate limiting"
    )

    RATE_LIMIT_MAX: int = Field(
        default=200,
        ge=1,
        description="Requests allowed per client inside one window"
    )

    RATE_LIMIT_REDIS_URL: str | None = Field(
        default=None,
        description="Redis URL for a shared rate limit store (in-memory when unset)"
    )

    # -------------------------------------------------------------------------
    # Request Limits
    # -------------------------------------------------------------------------

    BODY_LIMIT_BYTES: int = Field(
        default=1_048_576,
        ge=1,
        description="Maximum request body size in bytes"
    )

    HEADER_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="Time allowed before the first body chunk arrives"
    )

    CHUNK_TIMEOUT_SECONDS: float = Field(
        default=2.0,
        gt=0,
        description="Maximum gap between two body chunks"
    )

    TOTAL_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Maximum time to produce a response"
    )

    MAX_HEADER_COUNT: int = Field(default=100, ge=1)
    MAX_SINGLE_HEADER_BYTES: int = Field(default=4_096, ge=1)
    MAX_TOTAL_HEADER_BYTES: int = Field(default=8_192, ge=1)

    ALLOW_CHUNKED: bool = Field(
        default=False,
        description="Accept Transfer-Encoding: chunked request bodies"
    )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    SHUTDOWN_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Time budget for stopping each service during shutdown"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


def format_settings_errors(exc: ValidationError) -> list[str]:
    """
    Turn a settings ValidationError into one line per invalid variable.

    Example:
        ["↳ Invalid API_PORT -> Input should be less than or equal to 65535 (got '70000')"]
    """
    lines = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "(root)"
        line = f"↳ Invalid {field} -> {error['msg']}"
        if "input" in error and not isinstance(error["input"], dict):
            line += f" (got {error['input']!r})"
        lines.append(line)
    return lines


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


def load_settings() -> Settings:
    """
    Validate configuration for the server entry point.

    Logs every invalid variable at critical level and exits with status 1
    instead of surfacing a traceback.
    """
    try:
        return get_settings()
    except ValidationError as exc:
        logger.critical("Invalid environment configuration")
        for line in format_settings_errors(exc):
            logger.critical(line)
        sys.exit(1)
