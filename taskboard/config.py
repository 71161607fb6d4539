"""Configuration for the task board store."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from ``TASKBOARD_*`` environment variables."""

    # Backend
    data_file: Path = Path("data/app-data.json")

    # Client
    api_base_url: str = "http://localhost:8000"
    # None disables the client-side timeout; failed round trips are never retried.
    request_timeout: Optional[float] = None
    reminder_interval_seconds: int = 60

    # App
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
