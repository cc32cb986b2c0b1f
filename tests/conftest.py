# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a small Arabic catalog, an in-memory store, settings without .env,
a controllable clock and a ready SearchEngine.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from maktaba.cache.memory_cache import MemoryResultCache
from maktaba.config.settings import Settings
from maktaba.core.models import CatalogEntry
from maktaba.search.engine import SearchEngine
from maktaba.storage.base_catalog_store import BaseCatalogStore
from maktaba.storage.memory_store import InMemoryCatalogStore


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# === FIXTURES: Sample data ===


@pytest.fixture
def fiqh_entry() -> CatalogEntry:
    return CatalogEntry(
        id=1, title="كتاب الفقه", author="محمد", category="فقه",
        parts=["file-1a", "file-1b"], request_count=5, total_requests=5,
    )


@pytest.fixture
def muamalat_entry() -> CatalogEntry:
    return CatalogEntry(
        id=2, title="فقه المعاملات", author="علي", category="فقه",
        parts=["file-2"], request_count=50, total_requests=60,
    )


@pytest.fixture
def sample_entries(fiqh_entry: CatalogEntry, muamalat_entry: CatalogEntry) -> list[CatalogEntry]:
    """Two fiqh books plus unrelated titles across categories."""
    return [
        fiqh_entry,
        muamalat_entry,
        CatalogEntry(
            id=3, title="تاريخ الطبري", author="الطبري", category="تاريخ",
            parts=["file-3"], request_count=0,
        ),
        CatalogEntry(
            id=4, title="ديوان المتنبي", author="المتنبي", category="أدب",
            parts=[], request_count=12,
        ),
        CatalogEntry(
            id=42, title="رسالة في النحو", author="سيبويه", category="لغة",
            parts=["file-42"], request_count=1,
        ),
    ]


@pytest.fixture
def memory_store(sample_entries: list[CatalogEntry]) -> InMemoryCatalogStore:
    return InMemoryCatalogStore(sample_entries)


# === FIXTURES: Configuration ===


@pytest.fixture
def settings() -> Settings:
    """Defaults only: weights 0.7/0.3, threshold 0.3, limit 10."""
    return Settings(_env_file=None)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(fake_clock: FakeClock) -> MemoryResultCache:
    return MemoryResultCache(ttl_seconds=600, max_keys=100, clock=fake_clock)


@pytest.fixture
def engine(
    memory_store: InMemoryCatalogStore, cache: MemoryResultCache, settings: Settings
) -> SearchEngine:
    return SearchEngine(store=memory_store, cache=cache, settings=settings)


@pytest.fixture
def mock_store(sample_entries: list[CatalogEntry]) -> AsyncMock:
    """AsyncMock store returning the sample catalog for every fetch."""
    store = AsyncMock(spec=BaseCatalogStore)
    store.fetch_candidates = AsyncMock(return_value=list(sample_entries))
    store.fetch_by_id = AsyncMock(return_value=None)
    return store


# === FIXTURES: Temp dirs ===


@pytest.fixture
def tmp_db_path(tmp_path: Path) -> Path:
    """Path for a throwaway catalog database."""
    return tmp_path / "catalog" / "library.db"
