"""Application configuration from environment variables."""

from functools import lru_cache

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file."""

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./suvidha.db",
        description="SQLAlchemy async connection string",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Auth
    auth_secret: str = Field(
        default="change-me-in-production", description="HMAC secret for bearer tokens"
    )
    token_max_age_seconds: int = Field(
        default=7 * 24 * 3600, description="Lifetime of issued bearer tokens"
    )

    # Localization
    default_language: str = Field(default="en", description="Fallback UI language (en or hi)")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Server log file path")

    # API
    api_title: str = Field(default="SUVIDHA Kiosk API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"], description="Allowed CORS origins"
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process settings, instantiated on first use."""
    return Settings()


__all__ = ["Settings", "get_settings"]
