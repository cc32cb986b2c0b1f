# src/cache/memory_cache.py — v1
"""In-process result cache (the only backend; nothing survives a restart).

Expiry is checked on every read, and a periodic sweep removes expired
entries during writes. When full, expired entries go first, then the
least recently used one.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Sequence
from typing import Any

from maktaba.cache.base_result_cache import BaseResultCache
from maktaba.cache.models import CacheEntry, CacheStats
from maktaba.core.errors import CacheWriteFailure

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 600
DEFAULT_MAX_KEYS = 1000
DEFAULT_CHECK_PERIOD_SECONDS = 120


class MemoryResultCache(BaseResultCache):
    """Thread-safe TTL + LRU cache guarded by a single lock."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_keys: int = DEFAULT_MAX_KEYS,
        check_period_seconds: float = DEFAULT_CHECK_PERIOD_SECONDS,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_keys = max_keys
        self._check_period = check_period_seconds
        self._enabled = enabled
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._last_sweep = clock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def get(self, key: str) -> list[Any] | None:
        if not self._enabled:
            return None

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired(self._clock()):
                del self._entries[key]
                entry = None

            if entry is None:
                self._misses += 1
                logger.debug("Cache miss for key: %s", key)
                return None

            self._entries.move_to_end(key)
            self._hits += 1
        logger.debug("Cache hit for key: %s", key)
        return list(entry.value)

    def set(self, key: str, value: Sequence[Any], ttl: float | None = None) -> bool:
        if not self._enabled:
            return False

        with self._lock:
            now = self._clock()
            self._maybe_sweep(now)

            if key not in self._entries and not self._make_room(now):
                logger.debug("Cache full, refused key: %s", key)
                return False

            self._entries[key] = CacheEntry(
                key=key,
                value=tuple(value),
                expires_at=now + (self._ttl if ttl is None else ttl),
            )
            self._entries.move_to_end(key)
        logger.debug("Cached value for key: %s", key)
        return True

    def set_or_raise(self, key: str, value: Sequence[Any], ttl: float | None = None) -> None:
        """Like set(), but raise CacheWriteFailure when the write is refused."""
        if not self.set(key, value, ttl):
            raise CacheWriteFailure(key)

    def delete(self, key: str) -> int:
        with self._lock:
            return 1 if self._entries.pop(key, None) is not None else 0

    def flush(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.info("Cache flushed")

    def stats(self) -> CacheStats:
        with self._lock:
            now = self._clock()
            live = sum(1 for e in self._entries.values() if not e.is_expired(now))
            total = self._hits + self._misses
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                hit_rate=self._hits / total if total else 0.0,
                key_count=live,
            )

    # --- internals (caller holds the lock) ---

    def _make_room(self, now: float) -> bool:
        if len(self._entries) < self._max_keys:
            return True
        self._sweep(now)
        if len(self._entries) < self._max_keys:
            return True
        if not self._entries:
            return False
        evicted, _ = self._entries.popitem(last=False)
        logger.debug("Evicted least recently used key: %s", evicted)
        return True

    def _maybe_sweep(self, now: float) -> None:
        if now - self._last_sweep >= self._check_period:
            self._sweep(now)

    def _sweep(self, now: float) -> None:
        expired = [k for k, e in self._entries.items() if e.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
        if expired:
            logger.debug("Swept %d expired cache entries", len(expired))
