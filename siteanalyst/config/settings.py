"""
Settings - Application configuration using Pydantic Settings.

Loads from environment variables and .env files.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Gemini (API key optional - falls back to Application Default Credentials)
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    gemini_timeout_seconds: int = 300
    gemini_max_retries: int = Field(default=3, ge=1)
    gemini_rate_limit_rpm: int = Field(default=60, ge=1)

    # Geocoding
    geocoding_url: str = "https://geocode.maps.co/search"
    geocoding_api_key: str | None = None
    geocoding_min_delay_seconds: float = Field(default=2.0, ge=0.0)
    geocoding_timeout_seconds: float = 30.0

    # Uploads
    max_upload_mb: int = 50

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
