"""Validation settings loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["ValidationSettings", "get_settings"]


class ValidationSettings(BaseSettings):
    """Thresholds and naming used by the item validator.

    Values are read from ``ITEM_VALIDATION_*`` environment variables and
    from a ``.env`` file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="ITEM_VALIDATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Name errors are reported under (first segment of message codes)
    object_name: str = "item"

    # Rules
    price_min: int = 1000
    price_max: int = 1000000
    quantity_max: int = 9999
    total_price_min: int = 10000


@lru_cache
def get_settings() -> ValidationSettings:
    return ValidationSettings()
