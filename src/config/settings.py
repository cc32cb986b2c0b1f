# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for search tuning, cache limits, catalog backend
and logging. Every field maps to an upper-case env var of the same name
(e.g. SEARCH_FUZZY_THRESHOLD).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Search ===
    search_max_query_length: int = 37
    search_default_limit: int = 10
    search_max_limit: int = 50
    search_title_weight: float = 0.7
    search_author_weight: float = 0.3
    search_fuzzy_threshold: float = 0.3
    search_popularity_divisor: float = 100.0
    search_popularity_cap: float = 0.1

    # === Result cache ===
    cache_enabled: bool = True
    cache_ttl_seconds: int = 600
    cache_check_period_seconds: int = 120
    cache_max_keys: int = 1000

    # === Catalog store ===
    catalog_backend: Literal["memory", "sqlite"] = "sqlite"
    catalog_db_path: Path = Path("./library.db")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "5MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator(
        "search_title_weight",
        "search_author_weight",
        "search_fuzzy_threshold",
        "search_popularity_cap",
    )
    @classmethod
    def validate_unit_interval(cls, v: float, info) -> float:  # noqa: N805
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"{info.field_name} must be within [0, 1]")
        return v

    @field_validator(
        "search_max_query_length",
        "search_default_limit",
        "search_max_limit",
        "cache_ttl_seconds",
    )
    @classmethod
    def validate_positive(cls, v: int, info) -> int:  # noqa: N805
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @field_validator("cache_max_keys", "cache_check_period_seconds")
    @classmethod
    def validate_non_negative(cls, v: int, info) -> int:  # noqa: N805
        """0 is allowed: a zero-capacity cache refuses every write."""
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.search_default_limit > self.search_max_limit:
            errors.append(
                "SEARCH_DEFAULT_LIMIT must be <= SEARCH_MAX_LIMIT"
            )

        if self.search_popularity_divisor <= 0:
            errors.append("SEARCH_POPULARITY_DIVISOR must be > 0")

        if self.search_title_weight + self.search_author_weight == 0:
            errors.append(
                "SEARCH_TITLE_WEIGHT and SEARCH_AUTHOR_WEIGHT cannot both be 0"
            )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-process config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
