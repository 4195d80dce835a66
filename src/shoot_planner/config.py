"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "storyboard-images"
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "medium"
    openai_store: bool = False
    openai_image_model: str = "gpt-image-1"
    elevenlabs_api_key: str
    elevenlabs_base_url: str = "https://api.elevenlabs.io"
    poll_interval_seconds: float = 2.0
    poll_attempts: int = 30
    generation_attempts: int = 2
    max_images: int = 6
    image_aspect_ratio: str = "16:9"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
