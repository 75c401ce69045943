"""
Configuration settings for the device actionable store.

Uses Pydantic Settings to load environment variables for the storage location,
logging, retention and the analysis preference file.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_MS_PER_HOUR = 60 * 60 * 1000


class Settings(BaseSettings):
    # Storage
    db_path: Path = Field(Path("data/actionables.db"), alias="ACTIONABLE_DB_PATH")
    db_busy_timeout_ms: int = Field(5000, alias="ACTIONABLE_DB_BUSY_TIMEOUT_MS", ge=0)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Retention / maintenance
    retention_window_hours: float = Field(168.0, alias="RETENTION_WINDOW_HOURS", ge=0)
    maintenance_interval_seconds: float = Field(
        3600.0, alias="MAINTENANCE_INTERVAL_SECONDS", gt=0
    )
    maintenance_retry_attempts: int = Field(3, alias="MAINTENANCE_RETRY_ATTEMPTS", ge=1)
    maintenance_retry_wait_seconds: float = Field(
        1.0, alias="MAINTENANCE_RETRY_WAIT_SECONDS", ge=0
    )

    # Analysis preference flag
    preferences_path: Path = Field(
        Path("data/analysis_prefs.json"), alias="ANALYSIS_PREFS_PATH"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def retention_window_ms(self) -> int:
        """Retention window expressed in the same unit as record timestamps."""
        return int(self.retention_window_hours * _MS_PER_HOUR)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
