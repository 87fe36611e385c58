"""
Application Configuration

All settings loaded from environment variables.
Indicator parameters are nested under ``INDICATORS__`` (e.g. ``INDICATORS__RSI_PERIOD=21``).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings

from pricesignal.schemas.config import IndicatorConfig


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "PriceSignal"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Analysis
    indicator_cache_max_entries: int = 4096
    enable_sentiment: bool = True

    # Indicator parameters
    indicators: IndicatorConfig = IndicatorConfig()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_nested_delimiter = "__"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
