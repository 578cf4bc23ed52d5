"""
config.py

Runtime settings for the Quarterly Project Report Tracker.

Values are read from environment variables prefixed with ``REPORTS_``
(e.g. ``REPORTS_PORT=8080``) or from a local ``.env`` file.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REPORTS_",
        env_file=".env",
        extra="ignore",
    )

    app_title: str = "Quarterly Project Report Tracker API"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = False
    log_level: str = "info"
    cors_origins: List[str] = ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
