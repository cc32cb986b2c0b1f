# src/cache/base_result_cache.py — v2
"""Abstract result cache interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from maktaba.cache.models import CacheStats


class BaseResultCache(ABC):
    """Bounded string-keyed mapping of search results with TTL expiry."""

    @abstractmethod
    def get(self, key: str) -> list[Any] | None:
        """Return the cached value, or None on miss or expiry."""

    @abstractmethod
    def set(self, key: str, value: Sequence[Any], ttl: float | None = None) -> bool:
        """Store a value. Returns False instead of raising when refused."""

    @abstractmethod
    def delete(self, key: str) -> int:
        """Remove a key. Returns the number of removed entries."""

    @abstractmethod
    def flush(self) -> None:
        """Drop every entry and reset hit/miss counters."""

    @abstractmethod
    def stats(self) -> CacheStats:
        """Return hits, misses, hit rate and key count."""
