# src/search/discovery.py — v1
"""Browsing helpers around search: similar, popular, by-author, multi-field.

Plain async functions over a BaseCatalogStore. Filtering and ordering run
in Python so every store implementation behaves the same.
"""

from __future__ import annotations

import logging

from maktaba.core.models import CatalogEntry, SearchFilters
from maktaba.search.normalizer import normalize_text
from maktaba.storage.base_catalog_store import BaseCatalogStore

logger = logging.getLogger(__name__)

_ALL = SearchFilters()


def _by_popularity(entries: list[CatalogEntry]) -> list[CatalogEntry]:
    return sorted(entries, key=lambda e: e.request_count, reverse=True)


async def similar_entries(
    store: BaseCatalogStore, entry_id: int, limit: int = 5
) -> list[CatalogEntry]:
    """Other entries sharing the author or category of *entry_id*."""
    source = await store.fetch_by_id(entry_id)
    if source is None:
        return []

    candidates = await store.fetch_candidates(_ALL)
    related = [
        e for e in candidates
        if e.id != source.id
        and (
            e.author == source.author
            or (source.category is not None and e.category == source.category)
        )
    ]
    return _by_popularity(related)[:limit]


async def popular_entries(
    store: BaseCatalogStore, limit: int = 10, category: str | None = None
) -> list[CatalogEntry]:
    """Most requested entries, optionally within one category."""
    candidates = await store.fetch_candidates(SearchFilters(category=category))
    requested = [
        e for e in candidates
        if e.request_count > 0 and (category is None or e.category == category)
    ]
    return _by_popularity(requested)[:limit]


async def entries_by_author(
    store: BaseCatalogStore,
    author: str,
    exclude_id: int | None = None,
    limit: int = 10,
) -> list[CatalogEntry]:
    """Entries whose author equals *author* after normalization."""
    wanted = normalize_text(author)
    candidates = await store.fetch_candidates(_ALL)
    same = [
        e for e in candidates
        if normalize_text(e.author) == wanted and e.id != exclude_id
    ]
    return _by_popularity(same)[:limit]


async def multi_field_search(
    store: BaseCatalogStore,
    title: str | None = None,
    author: str | None = None,
    category: str | None = None,
    min_parts: int | None = None,
    max_parts: int | None = None,
) -> list[CatalogEntry]:
    """Conjunctive filter over title/author substrings, category and part count."""
    candidates = await store.fetch_candidates(SearchFilters(category=category))
    title_needle = normalize_text(title).lower() if title else None
    author_needle = normalize_text(author).lower() if author else None

    results: list[CatalogEntry] = []
    for e in candidates:
        if category and e.category != category:
            continue
        if title_needle and title_needle not in normalize_text(e.title).lower():
            continue
        if author_needle and author_needle not in normalize_text(e.author).lower():
            continue
        if min_parts is not None and e.parts_count < min_parts:
            continue
        if max_parts is not None and e.parts_count > max_parts:
            continue
        results.append(e)
    return results


async def record_delivery(store: BaseCatalogStore, entry_id: int) -> None:
    """Count a successful file delivery against *entry_id*."""
    await store.increment_request_count(entry_id)
    logger.info("Recorded delivery of entry %d", entry_id)
