"""
Configuration Settings

This module defines application configuration using Pydantic Settings.
All configuration is loaded from environment variables or .env file.

Settings are only read by the bootstrap code (shortener.main, shortener.cli)
and handed down explicitly; services and codec never touch the environment.

Database selection, first match wins:
- DATABASE_URL, e.g. sqlite+aiosqlite:///./shortener.db or memory://
- DB_HOST (+ DB_USER, DB_PASSWORD, DB_PORT, DATABASE_NAME): MySQL via aiomysql
- SQLite file in the working directory
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

__all__ = ["EnvSettingsOptions", "Settings", "get_settings"]

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./shortener.db"


class EnvSettingsOptions(Enum):
    """Environment options for deployment."""
    production = "production"
    staging = "staging"
    development = "dev"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    ENV_SETTING: EnvSettingsOptions = Field(
        default=EnvSettingsOptions.development,
        description="Environment setting (production, staging, dev)"
    )

    # Database Configuration
    DATABASE_URL: Optional[str] = Field(
        default=None,
        description="SQLAlchemy async URL, or memory:// for a process-local store"
    )
    DB_USER: Optional[str] = Field(default=None, description="MySQL user")
    DB_PASSWORD: Optional[str] = Field(default=None, description="MySQL password")
    DB_HOST: Optional[str] = Field(default=None, description="MySQL host")
    DB_PORT: Optional[int] = Field(default=None, description="MySQL port")
    DATABASE_NAME: str = Field(default="shortener", description="MySQL database name")

    # Shortening behaviour
    BASE_URL: Optional[str] = Field(
        default=None,
        description="Public base for short links; the request Host header is used when unset"
    )
    STRICT_DEDUP: bool = Field(
        default=False,
        description="Serialize shortening per URL and enforce one row per URL"
    )
    ALLOWED_SCHEMES: List[str] = Field(
        default_factory=lambda: ["http", "https"],
        description="URL schemes accepted for shortening"
    )

    # Server Configuration
    HOST: str = Field(default="0.0.0.0", description="Listen address")
    EXPOSED_PORT: int = Field(default=8000, description="Listen port")

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_JSON: bool = Field(default=False, description="Emit JSON formatted log lines")

    def resolved_database_url(self) -> str:
        """Return the database URL the service should connect to."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if self.DB_HOST:
            url = URL.create(
                "mysql+aiomysql",
                username=self.DB_USER,
                password=self.DB_PASSWORD,
                host=self.DB_HOST,
                port=self.DB_PORT,
                database=self.DATABASE_NAME,
            )
            return url.render_as_string(hide_password=False)

        return DEFAULT_DATABASE_URL


def get_settings() -> Settings:
    """Load settings from the environment."""
    return Settings()
