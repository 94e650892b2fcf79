"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1"

    # Storage
    store_backend: Literal["memory", "sqlite"] = "memory"
    sqlite_path: str = "./data.db"

    # Uploads
    max_upload_bytes: int = 50 * 1024 * 1024  # 50 MiB
    pdf_dpi: int = 150

    # HTTP
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Debug flags
    sql_debug: bool = False
    debug: bool = False

    model_config = SettingsConfigDict(
        # Load from .env file in the package directory
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.
    """
    return Settings()
