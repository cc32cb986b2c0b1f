# tests/integration/conftest.py — v8
"""Shared fixtures for integration tests against a real SQLite catalog.

No external services: every test gets a fresh database file under tmp_path,
seeded with Arabic and Persian titles.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import pytest

from maktaba.cache.memory_cache import MemoryResultCache
from maktaba.config.settings import Settings
from maktaba.core.models import CatalogEntry
from maktaba.search.engine import SearchEngine
from maktaba.storage.sqlite_store import SqliteCatalogStore

logger = logging.getLogger(__name__)


# ── Pytest markers ──────────────────────────────────────────────

def pytest_collection_modifyitems(items):
    for item in items:
        if item.nodeid.startswith("tests/integration/"):
            item.add_marker(pytest.mark.integration)


# =====================================================================
#  CATALOG DATA
# =====================================================================

SEED_ENTRIES = [
    CatalogEntry(
        id=1, title="كتاب الفقه الميسر", author="محمد بن علي", category="فقه",
        parts=["fiqh-1", "fiqh-2"], request_count=5, total_requests=5,
    ),
    CatalogEntry(
        id=2, title="فقه المعاملات", author="علي الخفيف", category="فقه",
        parts=["muamalat"], request_count=50, total_requests=60,
    ),
    CatalogEntry(
        id=3, title="تاريخ الطبري", author="الطبري", category="تاريخ",
        parts=["tabari"],
    ),
    CatalogEntry(
        id=4, title="ديوان المتنبي", author="المتنبي", category="أدب",
        request_count=12, total_requests=12,
    ),
    CatalogEntry(
        id=7, title="مثنوی معنوی", author="مولوی", category="أدب",
        parts=["masnavi-1", "masnavi-2", "masnavi-3"], request_count=30,
        total_requests=30,
    ),
    CatalogEntry(
        id=42, title="رسالة في النحو", author="سيبويه", category="لغة",
        parts=["nahw"], request_count=1, total_requests=1,
    ),
]


# =====================================================================
#  FIXTURES
# =====================================================================

@pytest.fixture
def sqlite_store(tmp_path: Path) -> SqliteCatalogStore:
    """Fresh catalog file seeded with SEED_ENTRIES."""
    store = SqliteCatalogStore(tmp_path / "library.db")

    async def _seed() -> None:
        for entry in SEED_ENTRIES:
            await store.add_entry(entry)

    asyncio.run(_seed())
    logger.debug("Seeded %d entries into %s", len(SEED_ENTRIES), store.db_path)
    return store


@pytest.fixture
def sqlite_engine(sqlite_store: SqliteCatalogStore) -> SearchEngine:
    settings = Settings(_env_file=None, catalog_db_path=sqlite_store.db_path)
    return SearchEngine(
        store=sqlite_store,
        cache=MemoryResultCache(ttl_seconds=600, max_keys=100),
        settings=settings,
    )
