"""
Configuration settings for harper-frames.

Uses Pydantic Settings to load environment variables for logging and the
projection defaults applied to queries that do not set them explicitly.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Projection defaults
    default_key_column: str = Field("time", alias="FRAMES_KEY_COLUMN")
    default_discriminator: str = Field("series", alias="FRAMES_DISCRIMINATOR")
    qualify_columns: bool = Field(True, alias="FRAMES_QUALIFY_COLUMNS")
    flatten_nested: bool = Field(False, alias="FRAMES_FLATTEN_NESTED")

    # Response envelope
    max_notices: int = Field(50, alias="FRAMES_MAX_NOTICES")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
