"""
Jiji — Application Configuration

Loads all configuration from environment variables (and an optional .env file)
using Pydantic Settings.  A cached ``get_settings()`` helper is provided so that
FastAPI dependency-injection (and any other call-site) always receives the same
validated instance without re-parsing the environment on every request.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BUNDLED_CATALOG = Path(__file__).resolve().parent / "data" / "shops.json"


class Settings(BaseSettings):
    """Central configuration for the Jiji matching service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------ #
    # Shop catalog
    # ------------------------------------------------------------------ #
    CATALOG_PATH: str = str(_BUNDLED_CATALOG)
    DATA_SOURCE: str = "json_catalog"

    # ------------------------------------------------------------------ #
    # Matching
    # ------------------------------------------------------------------ #
    DEFAULT_MAX_RESULTS: int = 3

    # ------------------------------------------------------------------ #
    # Runtime environment
    # ------------------------------------------------------------------ #
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # ------------------------------------------------------------------ #
    # CORS
    # ------------------------------------------------------------------ #
    ALLOWED_ORIGINS: str = "*"

    # ------------------------------------------------------------------ #
    # Derived helpers
    # ------------------------------------------------------------------ #
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list split on commas."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",")]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @field_validator("DEFAULT_MAX_RESULTS")
    @classmethod
    def _max_results_in_range(cls, v: int) -> int:
        if not 1 <= v <= 10:
            raise ValueError(f"DEFAULT_MAX_RESULTS must be between 1 and 10, got {v}")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, validated ``Settings`` instance.

    Using ``@lru_cache`` guarantees the .env file is read and validated
    exactly once per process lifetime::

        from jiji.config import get_settings
        settings = get_settings()
    """
    return Settings()
