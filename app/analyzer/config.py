"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files.
"""

import logging
import sys
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Groq (OpenAI-compatible endpoint)
    groq_api_key: str | None = None
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"
    groq_temperature: float = 0.3
    groq_max_tokens: int = 8192

    # Input limits
    min_text_length: int = 100
    max_text_length: int = 30_000
    max_body_bytes: int = 10 * 1024 * 1024

    # Per-IP throttling of the analyze route
    rate_limit_max_requests: int = 10
    rate_limit_window_seconds: int = 60

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        # Load from .env file in the working directory
        env_file=Path(".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
    )

    @property
    def model_display_name(self) -> str:
        """Model identifier as reported by the health check."""
        return f"Groq {self.groq_model}"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.
    """
    return Settings()


def ensure_api_key(settings: Settings) -> None:
    """
    Terminate the process if the Groq credential is missing.

    Must run before the server binds its listener.
    """
    if not settings.groq_api_key or not settings.groq_api_key.strip():
        logger.critical("GROQ_API_KEY is missing. Set it in the environment or .env file.")
        sys.exit(1)
