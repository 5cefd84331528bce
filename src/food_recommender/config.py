"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str = "ollama"
    openai_base_url: str | None = "http://localhost:11434/v1"
    vision_model: str = "llava:7b"
    text_model: str = "mistral"
    embedding_model: str = "mistral"
    llm_timeout_seconds: float = 600.0
    store_timeout_seconds: float = 30.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
