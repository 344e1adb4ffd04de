"""Runtime configuration for the room booking service."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``ROOMCAL_*`` environment variables."""

    app_title: str = "Room Booking Calendar"
    default_language: str = "en"
    # Hover time on a corner padding cell before the grid pages month.
    auto_page_delay_seconds: float = Field(default=1.0, gt=0)
    seed_rooms: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="ROOMCAL_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    return Settings()
