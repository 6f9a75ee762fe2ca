"""
Configuration and settings for the catalog service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the catalog API and sync clients."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Relational store (Postgres expected, any SQLAlchemy URL works)
    database_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("DATABASE_URL", "database_url")
    )

    # Document store (Firestore, credentials from the environment)
    use_firestore: bool = Field(
        default=False,
        validation_alias=AliasChoices("CATALOG_USE_FIRESTORE", "use_firestore"),
    )

    # Remote catalog API for sync clients running outside the server
    catalog_api_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CATALOG_API_URL", "catalog_api_url"),
    )
    catalog_api_timeout: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("CATALOG_API_TIMEOUT", "catalog_api_timeout"),
    )

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "CATALOG_USE_IN_MEMORY_BACKENDS", "use_in_memory_backends"
        ),
    )
    auto_seed: bool = Field(
        default=True, validation_alias=AliasChoices("CATALOG_AUTO_SEED", "auto_seed")
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
