"""
Configuration management using Pydantic settings.

All configuration values are loaded from environment variables or .env file.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server Configuration
    port: int = 3001
    host: str = "127.0.0.1"
    reload: bool = False

    # Upload Storage
    upload_root: str = "uploads"
    max_file_size: int = 10 * 1024 * 1024  # 10 MiB per file
    max_files_per_upload: int = 20

    # Session Management
    session_ttl: int = 24 * 60 * 60  # Idle time before eviction (24 hours)
    session_cleanup_interval: int = 60 * 60  # Sweep every hour

    # Settings and prompt library files
    config_dir: str = "config"

    # Gemini image generation
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash-image-preview"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout: int = 120
    gemini_max_retries: int = 2
    gemini_retry_delay: float = 1.0
    gemini_max_input_images: int = 3
    gemini_requests_per_minute: int = 10

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Singleton Settings instance loaded from environment.

    Note:
        Uses lru_cache to ensure settings are loaded only once.
        To reload settings (e.g., in tests), call get_settings.cache_clear()
    """
    return Settings()
