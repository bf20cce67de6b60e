"""
Unified configuration for the disaster-hub service.

This module provides a single Settings class for every build-time value the
dashboard needs: deployment identifier, identity-service configuration,
initial session credential, and the generation-endpoint API key.
Values are read once at startup from the .env file and the environment.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Unified settings for the disaster-hub service.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    # Service identification
    SERVICE_NAME: str = "disaster-hub"
    APP_ID: str = "default-app-id"

    # Generation endpoint (Gemini)
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_TIMEOUT: float = 60.0

    # Query retry budget: 1 initial attempt + 3 retries, waits of base**k seconds
    QUERY_MAX_ATTEMPTS: int = 4
    QUERY_BACKOFF_BASE: float = 2.0

    # Identity service
    IDENTITY_CONFIG: str = "{}"
    INITIAL_AUTH_TOKEN: str | None = None

    # Water-level simulation
    WATER_TICK_SECONDS: float = 3.0

    # Rate limiting for the query endpoint
    ASK_RATE_LIMIT: str = "10/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # App host/port
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore"
    )

    @property
    def identity_config(self) -> dict[str, Any]:
        """Decode the identity-service configuration blob.

        An empty or malformed blob yields an empty dict, which leaves the
        identity provider able to issue anonymous sessions only.
        """
        try:
            config = json.loads(self.IDENTITY_CONFIG or "{}")
        except json.JSONDecodeError:
            return {}
        return config if isinstance(config, dict) else {}

    @property
    def registry_collection_path(self) -> str:
        """Collection path of the public aid registry for this deployment."""
        return f"artifacts/{self.APP_ID}/public/data/destroyed_properties"


# Global settings instance
settings = Settings()  # type: ignore
