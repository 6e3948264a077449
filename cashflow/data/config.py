"""
Storage configuration using pydantic-settings.

Selects where saved games live and how the SQL backend connects.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackend(str, Enum):
    JSON = "json"
    SQL = "sql"


class StorageSettings(BaseSettings):
    """
    Storage configuration loaded from environment variables.

    Environment variables (prefix: CASHFLOW_):
        CASHFLOW_STORAGE_BACKEND - json | sql (default: json)
        CASHFLOW_JSON_PATH       - saved-game file for the json backend
        CASHFLOW_DATABASE_URL    - SQLAlchemy URL for the sql backend
        CASHFLOW_DB_ECHO         - echo SQL statements (default: false)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="CASHFLOW_",
    )

    storage_backend: StorageBackend = Field(default=StorageBackend.JSON)
    json_path: str = Field(default="cashflow_game_state.json")
    database_url: str = Field(default="sqlite:///cashflow.db", description="SQLAlchemy connection URL")
    db_echo: bool = Field(default=False)

    @field_validator("database_url")
    @classmethod
    def validate_sync_url(cls, v: str) -> str:
        """Saved games use a synchronous engine, so async drivers are rejected."""
        if "+asyncpg" in v or "+aiosqlite" in v:
            raise ValueError("CASHFLOW_DATABASE_URL must use a synchronous driver")
        return v

    def get_engine_kwargs(self) -> dict:
        """Return SQLAlchemy engine configuration."""
        kwargs = {"echo": self.db_echo}
        if not self.database_url.startswith("sqlite"):
            kwargs["pool_pre_ping"] = True  # Verify connections before using
        return kwargs


@lru_cache
def get_storage_settings() -> StorageSettings:
    """Cached storage settings singleton."""
    return StorageSettings()
