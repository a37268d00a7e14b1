"""
Runtime configuration helpers for the Housers view-model service.

Loads BACKEND_URL and the other variables from the .env file
located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required fields: must come from .env or the environment
    backend_url: str = Field(..., alias="BACKEND_URL")
    backend_api_key: str = Field(..., alias="BACKEND_API_KEY")

    # Optional fields
    app_name: str = Field(default="Housers View Service", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    cors_origins: str | None = Field(default=None, alias="CORS_ORIGINS")

    # Listing import API (separate from the hosted backend)
    api_base_url: str = Field(default="https://api.housers.us", alias="API_BASE_URL")
    onboarding_import_path: str = Field(default="/api/onboarding-import", alias="ONBOARDING_IMPORT_PATH")
    max_imports_per_session: int = Field(default=10, alias="MAX_IMPORTS_PER_SESSION")

    password_reset_redirect: str = Field(default="housers://reset-password", alias="PASSWORD_RESET_REDIRECT")

    # None keeps the httpx transport default
    http_timeout: float | None = Field(default=None, alias="HTTP_TIMEOUT")
    notification_page_size: int = Field(default=50, alias="NOTIFICATION_PAGE_SIZE")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
