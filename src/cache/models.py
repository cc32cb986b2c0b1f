# src/cache/models.py — v2
"""Result cache models: CacheEntry, CacheStats."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CacheEntry(BaseModel):
    """One cached search result. Occupies exactly one capacity slot."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: tuple[Any, ...]
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class CacheStats(BaseModel):
    """Snapshot of cache accounting."""

    hits: int = 0
    misses: int = 0
    hit_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    key_count: int = 0
