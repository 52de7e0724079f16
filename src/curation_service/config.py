"""Application configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = "storefront-curation"
    app_env: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # -------------------------------------------------------------------------
    # API Settings
    # -------------------------------------------------------------------------
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_workers: int = 4
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "https://kzmusicstore.com.br",
            "https://www.kzmusicstore.com.br",
            "https://kzmusicstore.com",
            "https://www.kzmusicstore.com",
        ]
    )
    cors_origin_regex: str = r"^https://[a-z0-9-]+\.myshopify\.com$"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # -------------------------------------------------------------------------
    # Key-Value Store (Redis)
    # -------------------------------------------------------------------------
    kv_backend: Literal["redis", "memory"] = "redis"
    kv_url: str = ""
    kv_timeout_seconds: float = 2.0
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0

    @property
    def redis_url(self) -> str:
        """Construct Redis connection URL, preferring an explicit KV_URL."""
        if self.kv_url:
            return self.kv_url
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # -------------------------------------------------------------------------
    # Stores
    # -------------------------------------------------------------------------
    key_namespace: str = "kz"
    primary_store: Literal["br", "global"] = "br"

    # -------------------------------------------------------------------------
    # Shopify Admin API
    # -------------------------------------------------------------------------
    shopify_store: str = ""
    shopify_admin_token: str = ""
    shopify_api_version: str = "2024-01"
    shopify_timeout: float = 15.0
    shopify_max_concurrency: int = 5
    shopify_search_page_size: int = 20

    @property
    def shopify_graphql_url(self) -> str:
        """Admin GraphQL endpoint for the configured shop."""
        return f"https://{self.shopify_store}/admin/api/{self.shopify_api_version}/graphql.json"

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------
    admin_password: str = ""

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    rate_limit_per_minute: int = 60
    rate_limit_window_seconds: int = 60

    # -------------------------------------------------------------------------
    # Curation Settings
    # -------------------------------------------------------------------------
    duplicate_handle_policy: Literal["keep_first", "replace"] = "keep_first"
    recommendations_cache_seconds: int = 86400
    recommendations_stale_seconds: int = 604800
    quiz_cache_seconds: int = 3600
    quiz_stale_seconds: int = 86400


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
