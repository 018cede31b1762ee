# src/files_store/config/settings.py
import logging
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from files_store.config.settings import get_settings
        settings = get_settings()
        url = settings.mongodb_url
    """

    # Application Settings
    app_name: str = Field(
        default="files-store",
        description="Application name"
    )

    # MongoDB Configuration
    mongodb_url: str = Field(
        default="mongodb://localhost:27017",
        alias="MONGODB_URL",
        description="Connection string for the MongoDB deployment holding files and metadata"
    )

    database_name: str = Field(
        default="with-baby-store",
        description="Database holding the GridFS bucket and the metadata collection"
    )

    collection_name: str = Field(
        default="files",
        description="Collection holding one metadata record per stored file"
    )

    bucket_name: str = Field(
        default="fs",
        description="GridFS bucket name"
    )

    # HTTP listener
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept any casing and reject names the logging module does not know."""
        level = str(v).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Invalid log_level: {v}")
        return level

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
