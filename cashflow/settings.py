"""
Central application configuration using pydantic-settings.

This module provides typed access to environment-based configuration for
game rules and logging. Storage configuration lives in
`cashflow.data.config.StorageSettings`.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Game and logging configuration.

    Environment variables (prefix: CASHFLOW_):
        CASHFLOW_CUSTOM_MODE - scale starting cash, expenses and passive income (default: false)
        CASHFLOW_SEED        - fixed RNG seed for reproducible games (default: unset)
        CASHFLOW_LOG_LEVEL   - root log level (default: INFO)
        CASHFLOW_LOG_LIMIT   - number of game log entries kept for display (default: 50)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="CASHFLOW_",
    )

    custom_mode: bool = Field(default=False, description="Enable custom-mode profession and income multipliers.")
    seed: Optional[int] = Field(default=None, description="RNG seed; random when unset.")
    log_level: str = Field(default="INFO")
    log_limit: int = Field(default=50, gt=0, description="Game log entries kept for display.")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return value


@lru_cache
def get_app_settings() -> AppSettings:
    """Return cached application settings instance."""
    return AppSettings()
