"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://fastfilter:fastfilter_dev_password@db:5432/fastfilter"

    # Backends
    catalog_backend: Literal["database", "memory"] = "database"
    cache_backend: Literal["database", "memory"] = "database"

    # Cache
    cache_namespace: str = "ff"
    cache_ttl_seconds: int = 3600
    caching_enabled: bool = True
    invalidation_enabled: bool = True
    cache_warming_enabled: bool = False

    # Catalog events
    catalog_event_secret: str = "dev-catalog-event-secret-change-in-production"

    # Storefront
    storefront_url: str = "http://localhost:8000"
    currency_symbol: str = "$"

    # Demo catalog (memory backend)
    demo_seed: int = 42
    demo_products_per_category: int = 8

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_prefix = "FASTFILTER_"
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
