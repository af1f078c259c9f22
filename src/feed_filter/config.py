"""Configuration handling for the feed filter service."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration sourced from environment variables or .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Upstream feed retrieval
    user_agent: str = Field(
        default="RSS-Feed-Filter/1.0", validation_alias="FEED_FILTER_USER_AGENT"
    )
    fetch_timeout_seconds: float = Field(
        default=10.0,
        validation_alias="FEED_FILTER_FETCH_TIMEOUT_SECONDS",
        ge=1.0,
        le=120.0,
        description="Timeout in seconds for the upstream feed request.",
    )

    # Filtering
    regex_timeout_ms: int = Field(
        default=2000,
        validation_alias="FEED_FILTER_REGEX_TIMEOUT_MS",
        ge=1,
        description="Per-item wall-clock budget for a single regex match.",
    )

    # Diagnostics
    parse_excerpt_chars: int = Field(
        default=200,
        validation_alias="FEED_FILTER_PARSE_EXCERPT_CHARS",
        ge=0,
        description="How much of an unparseable document is kept on the error.",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
