# tests/unit/cache/test_unit_cache_factory.py — v1
"""Tests for cache/cache_factory.py."""

from __future__ import annotations

from maktaba.cache.cache_factory import create_result_cache
from maktaba.cache.memory_cache import MemoryResultCache
from maktaba.config.settings import Settings


class TestCreateResultCache:
    def test_default(self):
        cache = create_result_cache()
        assert isinstance(cache, MemoryResultCache)
        assert cache.enabled is True

    def test_disabled_from_settings(self):
        cache = create_result_cache(Settings(_env_file=None, cache_enabled=False))
        assert cache.enabled is False
        assert cache.set("k", []) is False

    def test_capacity_from_settings(self):
        cache = create_result_cache(Settings(_env_file=None, cache_max_keys=1))
        cache.set("a", [1])
        cache.set("b", [2])
        assert cache.stats().key_count == 1

    def test_fresh_instance_each_call(self):
        s = Settings(_env_file=None)
        assert create_result_cache(s) is not create_result_cache(s)
