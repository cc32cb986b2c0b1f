# src/cache/cache_factory.py — v3
"""Factory for result cache instantiation."""

from __future__ import annotations

from maktaba.cache.base_result_cache import BaseResultCache
from maktaba.cache.memory_cache import MemoryResultCache
from maktaba.config.settings import Settings


def create_result_cache(settings: Settings | None = None) -> BaseResultCache:
    """Instantiate the result cache from configuration.

    Args:
        settings: Application settings. Defaults to built-in cache limits.

    Returns:
        A fresh, empty cache. Disabled when CACHE_ENABLED is false.
    """
    if settings is None:
        return MemoryResultCache()

    return MemoryResultCache(
        ttl_seconds=settings.cache_ttl_seconds,
        max_keys=settings.cache_max_keys,
        check_period_seconds=settings.cache_check_period_seconds,
        enabled=settings.cache_enabled,
    )
