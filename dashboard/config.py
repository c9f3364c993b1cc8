"""Gateway configuration.

Every setting comes from an environment variable with a local-development
default, the same way the backend URL used to come from ``VITE_API_URL``.
"""

import os
from functools import lru_cache
from typing import List

from pydantic import BaseModel, Field, field_validator

DEFAULT_API_URL = "http://localhost:5000"


class Settings(BaseModel):
    """Runtime settings for the dashboard gateway."""

    api_url: str = DEFAULT_API_URL
    request_timeout: float = Field(10.0, gt=0)
    max_retries: int = Field(2, ge=0)
    retry_backoff: float = Field(0.5, ge=0)
    page_size: int = Field(50, gt=0)
    catalog_page_size: int = Field(6, gt=0)
    wake_up_refresh: int = Field(15, ge=1)
    cors_origins: List[str] = ["http://localhost:5173"]
    log_level: str = "INFO"

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("API URL must not be empty")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()


def load_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings(
        api_url=os.getenv("LFC_API_URL", DEFAULT_API_URL),
        request_timeout=float(os.getenv("LFC_REQUEST_TIMEOUT", "10")),
        max_retries=int(os.getenv("LFC_MAX_RETRIES", "2")),
        retry_backoff=float(os.getenv("LFC_RETRY_BACKOFF", "0.5")),
        page_size=int(os.getenv("LFC_PAGE_SIZE", "50")),
        catalog_page_size=int(os.getenv("LFC_CATALOG_PAGE_SIZE", "6")),
        wake_up_refresh=int(os.getenv("LFC_WAKE_UP_REFRESH", "15")),
        cors_origins=[
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")
            if origin.strip()
        ],
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


@lru_cache
def get_settings() -> Settings:
    """Cached settings; tests clear the cache with ``get_settings.cache_clear()``."""
    return load_settings()
