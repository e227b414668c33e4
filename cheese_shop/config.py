"""
Configuration settings for the cheese shop service.

Values come from ``CHEESE_SHOP_*`` environment variables or a ``.env``
file, e.g. ``CHEESE_SHOP_DATA_FILE=/var/lib/cheese/cheeses.json``.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Storage
    data_file: Path = Path("data/cheeses.json")

    # Server
    host: str = "127.0.0.1"
    port: int = 3000

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    model_config = SettingsConfigDict(
        env_prefix="CHEESE_SHOP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
