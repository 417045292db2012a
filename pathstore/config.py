"""Store configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """PathStore settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///data/db/pathstore.db"
    table_name: str = Field(default="virtual_files", min_length=1)

    # Partition of the shared table served by this process
    source: str = Field(default="default", min_length=1)

    @field_validator("table_name", "source")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        """Reject whitespace-only identifiers."""
        _ = cls
        if not v.strip():
            raise ValueError("must not be empty or whitespace-only")
        return v
