"""Application configuration via environment variables."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "MATRIX_",
        "env_file": ".env",
        "extra": "ignore",
        "populate_by_name": True,
    }

    # API key — no prefix, so it matches the provider convention
    openai_api_key: str = Field(default="", validation_alias="OPENAI_API_KEY")

    # Provider
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_timeout: float | None = None  # None waits on the provider indefinitely
    system_prompt: str = "You are a supportive mental coach."

    # Relay server
    host: str = "127.0.0.1"
    port: int = 8000

    # Terminal client — where to find the relay
    api_url: str = "http://localhost:8000"

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
