"""
Application configuration settings.

Central configuration module using Pydantic BaseSettings with environment variable support.
Loads from .env file and environment variables.
"""
import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file if it exists (python-dotenv)
env_path = Path(".env")
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # App settings
    APP_NAME: str = "ASA Expander"
    APP_ENV: str = Field(default="local")
    DEBUG: bool = Field(default=False)

    # CORS settings
    CORS_ORIGINS: Union[str, List[str]] = Field(
        default='["http://localhost:3000", "http://localhost:8000"]',
    )

    @field_validator("CORS_ORIGINS")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from string or list."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not JSON, treat as comma-separated
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Upload settings
    MAX_UPLOAD_SIZE: int = Field(
        default=10 * 1024 * 1024, description="Max upload size in bytes (10MB default)"
    )

    # Expansion behaviour
    SUBSTITUTE_NAMES: bool = Field(
        default=True,
        description="Replace 'name' definitions with their addresses (ignored when the config has 'no names')",
    )
    GROUP_COMMANDS: bool = Field(
        default=True,
        description="Insert '!' separators between command groups and cluster route/static commands",
    )
    ANNOTATE_NAT: bool = Field(
        default=True,
        description="Add comment lines describing the objects used by nat commands",
    )
    EXPAND_ACCESS_LISTS: bool = Field(
        default=True,
        description="Rewrite access-list entries that reference objects into their expanded form",
    )
    MAX_EXPANSION_DEPTH: int = Field(
        default=64,
        ge=1,
        description="Maximum recursion depth when expanding a single access-list entry",
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    LOG_DIR: str = Field(default="logs")
    LOG_TO_FILE: bool = Field(default=False)

    # API Authentication
    API_KEY: Optional[str] = Field(
        default=None,
        description="API key for the expansion endpoints. Leave empty to disable authentication.",
    )

    def is_auth_enabled(self) -> bool:
        """Check if a static API key is configured and not empty."""
        return self.API_KEY is not None and self.API_KEY.strip() != ""


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
