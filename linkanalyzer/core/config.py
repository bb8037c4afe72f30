"""
Configuration system with environment-based settings.
Uses pydantic-settings for validation and type safety.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Application
    APP_VERSION: str = "1.0.0"
    ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Crawler
    CRAWLER_REQUEST_TIMEOUT: float = 30.0
    CRAWLER_MAX_CONTENT_BYTES: int = Field(10 * 1024 * 1024, gt=0)
    CRAWLER_MAX_REDIRECTS: int = Field(5, ge=0)
    CRAWLER_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    CRAWLER_ACCEPT: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    CRAWLER_ACCEPT_LANGUAGE: str = "en-US,en;q=0.9"

    # Bulk analysis
    BULK_MAX_URLS: int = 50
    BULK_DEFAULT_CONCURRENCY: int = Field(5, ge=1)

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors(cls, v: str | list) -> list:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def crawler_headers(self) -> dict[str, str]:
        """Default request headers sent with every page fetch."""
        return {
            "User-Agent": self.CRAWLER_USER_AGENT,
            "Accept": self.CRAWLER_ACCEPT,
            "Accept-Language": self.CRAWLER_ACCEPT_LANGUAGE,
        }


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance - created once per process."""
    return Settings()
