"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from meal_planner.domain.inventory import DEFAULT_CATEGORY

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["json", "supabase"] = "json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    data_dir: str = "data"
    api_token: str | None = None
    default_category: str = DEFAULT_CATEGORY
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_api_token(raw: str | None) -> str | None:
    """Return the configured API token, treating blank values as unset."""
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None
