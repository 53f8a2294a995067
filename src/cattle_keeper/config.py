"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_IMAGE_TYPES = "image/jpeg,image/png,image/gif,image/webp"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_key: str
    supabase_url: str
    supabase_service_key: str
    image_bucket: str = "cattle-images"
    max_image_size: int = 5 * 1024 * 1024
    allowed_image_types: str = DEFAULT_IMAGE_TYPES
    timezone: str = "UTC"
    audit_cache_path: str = ".cattle_keeper/audit_cache.json"
    api_base_url: str = "http://localhost:8000/api/v1"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_image_types(raw: str | None) -> frozenset[str]:
    """Parse the comma-separated list of accepted image MIME types."""
    if raw is None or not raw.strip():
        raw = DEFAULT_IMAGE_TYPES
    types = {chunk.strip().lower() for chunk in raw.split(",")}
    types.discard("")
    return frozenset(types)
