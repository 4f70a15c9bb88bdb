"""Storefront Configuration"""

import os
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

ENV_FILE = os.path.join(os.path.dirname(__file__), "..", "..", "config", ".env")


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Gelatico Storefront"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]

    # Hosted database (Supabase)
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_timeout: float = 30.0

    # Cart persistence
    cart_storage_key: str = "gelatico-cart"
    cart_storage_path: Optional[str] = None

    # Catalog
    catalog_path: Optional[str] = None

    # Checkout
    checkout_processing_delay: float = 1.0

    @property
    def backend_configured(self) -> bool:
        """Check if the hosted database is configured"""
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
