"""
Central configuration for blockmerkle.

A single, typed configuration object read from environment variables
(12-factor style) using pydantic-settings.

Usage:

    from blockmerkle.core.settings import get_settings

    settings = get_settings()
    hasher = Hasher(settings.hash_algorithm)
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blockmerkle.core.digest import DEFAULT_ALGORITHM, normalize_algorithm


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Library and CLI settings.

    Environment:
      - BLOCKMERKLE_HASH_ALGORITHM
      - BLOCKMERKLE_LOG_LEVEL
    """

    model_config = SettingsConfigDict(env_prefix="BLOCKMERKLE_")

    hash_algorithm: str = Field(
        default=DEFAULT_ALGORITHM,
        description="Digest algorithm for leaves and internal nodes.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level for the blockmerkle logger (DEBUG/INFO/WARNING/ERROR).",
    )

    @field_validator("hash_algorithm")
    @classmethod
    def _validate_algorithm(cls, v: str) -> str:
        return normalize_algorithm(v)

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        v = (v or "WARNING").upper()
        if v == "WARN":
            return "WARNING"
        if v not in _LOG_LEVELS:
            return "WARNING"
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached accessor for Settings.

    Call get_settings.cache_clear() after changing the environment.
    """
    return Settings()
