# src/catalog/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Product Catalog API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./catalog.db"

    # Cache: "memory" für Single-Process-Betrieb, "redis" für einen externen Store
    cache_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    cache_key_prefix: str = "catalog:"
    cache_ttl_seconds: int = Field(default=3600, gt=0)

    # Deadline für jeden Aufruf an Cache oder Datenbank
    call_timeout_seconds: float = Field(default=5.0, gt=0)

    # Pagination
    default_per_page: int = Field(default=10, ge=1)
    max_per_page: int = Field(default=100, ge=1, le=10_000)

    # CORS
    cors_origins: list[str] = Field(default=["*"])

    # Rate Limiting
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def rate_limit(self) -> str:
        return f"{self.rate_limit_requests} per {self.rate_limit_window_seconds} seconds"


@lru_cache
def get_settings() -> Settings:
    return Settings()
