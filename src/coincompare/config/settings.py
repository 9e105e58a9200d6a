"""Application settings using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from coincompare.constants.cache import (
    DEFAULT_CACHE_DURATION_MS,
    FOLLOWER_CACHE_FILENAME,
    TOKEN_LIST_CACHE_FILENAME,
)


class Settings(BaseSettings):
    """CoinCompare configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Application
    app_name: str = Field(default="CoinCompare", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Log level"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, ge=1, le=65535, description="Server port")

    # CoinMarketCap
    cmc_api_key: SecretStr = Field(default=SecretStr(""), description="CoinMarketCap API key")
    cmc_base_url: str = Field(
        default="https://pro-api.coinmarketcap.com",
        description="CoinMarketCap Pro API base URL",
    )
    cmc_timeout_seconds: float = Field(
        default=30.0, gt=0, description="CoinMarketCap request timeout"
    )

    # Twitter / X
    twitter_bearer_token: SecretStr = Field(
        default=SecretStr(""), description="Twitter API v2 bearer token (optional)"
    )
    scraper_enabled: bool = Field(
        default=True, description="Fall back to a headless browser scrape for followers"
    )
    scraper_headless: bool = Field(default=True, description="Run the scrape browser headless")
    scraper_timeout_ms: int = Field(
        default=30_000, ge=1000, description="Navigation timeout for the follower scrape"
    )

    # Caches
    cache_backend: Literal["file", "memory"] = Field(
        default="file", description="Where cached catalog and followers are kept"
    )
    vercel: bool = Field(
        default=False, description="Serverless deployment flag, forces the memory backend"
    )
    cache_dir: Path = Field(default=Path("cache"), description="Directory for file-backed caches")
    token_list_cache_duration: int = Field(
        default=DEFAULT_CACHE_DURATION_MS, ge=1, description="Catalog TTL in milliseconds"
    )
    twitter_cache_duration: int = Field(
        default=DEFAULT_CACHE_DURATION_MS, ge=1, description="Follower TTL in milliseconds"
    )

    @field_validator("cmc_base_url")
    @classmethod
    def validate_cmc_base_url(cls, v: str) -> str:
        """Validate CoinMarketCap URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("CoinMarketCap base URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def effective_cache_backend(self) -> Literal["file", "memory"]:
        """Backend actually used; serverless deployments have no writable disk."""
        return "memory" if self.vercel else self.cache_backend

    @property
    def token_list_cache_file(self) -> Path:
        return self.cache_dir / TOKEN_LIST_CACHE_FILENAME

    @property
    def follower_cache_file(self) -> Path:
        return self.cache_dir / FOLLOWER_CACHE_FILENAME


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
