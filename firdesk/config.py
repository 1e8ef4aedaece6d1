"""Application configuration using Pydantic settings."""

import logging
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Remote FIR service
    api_base_url: str = "http://localhost:8080/api"
    api_token: str | None = None  # Used only when no session header provider is injected
    request_timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_backoff_seconds: float = 1.0

    # Listing
    page_size: int = 5
    filter_debounce_ms: int = 400
    load_more_threshold_px: int = 100

    # Local persistence
    pin_storage_key: str = "pinnedFIRs"
    state_database_url: str = "sqlite:///firdesk_state.db"

    # Context menu geometry (px)
    context_menu_width: int = 200
    context_menu_height: int = 96
    context_menu_margin: int = 8
    viewport_width: int = 1280
    viewport_height: int = 800

    # Environment
    log_level: str = "INFO"
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging for the dashboard process."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
