"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    record_store_backend: str = "http"
    record_store_url: str | None = None
    record_store_project_id: str | None = None
    record_store_public_key: str | None = None
    record_store_timeout_seconds: float = 15.0
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    progress_step_delay_seconds: float = 0.15
    validation_delay_seconds: float = 0.1
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def missing_settings(settings: Settings, names: list[str]) -> list[str]:
    """Return the names of unset settings, upper-cased as env vars."""
    return [name.upper() for name in names if not getattr(settings, name)]
