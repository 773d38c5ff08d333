"""Application settings using Pydantic."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Speech Interpretation
    confidence_threshold: float = 0.72
    pressure_keyword: str = "压力"

    # Capacity Display
    display_height: float = 400.0

    # Workbook
    max_undo: int = 20
    default_title: str = "____ 井____段压裂施工"

    # Storage
    state_file: str = "fracvoice_state.json"
    export_dir: str = "."

    # Logging
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
