# src/storage/memory_store.py — v1
"""In-memory catalog store (CATALOG_BACKEND=memory). For tests and demos."""

from __future__ import annotations

from collections.abc import Iterable

from maktaba.core.models import CatalogEntry, SearchFilters
from maktaba.storage.base_catalog_store import BaseCatalogStore, entry_matches


class InMemoryCatalogStore(BaseCatalogStore):
    """Dict-backed catalog keyed by entry id, iterated in id order."""

    def __init__(self, entries: Iterable[CatalogEntry] = ()) -> None:
        self._entries: dict[int, CatalogEntry] = {e.id: e for e in entries}

    async def fetch_candidates(self, filters: SearchFilters) -> list[CatalogEntry]:
        return [
            self._entries[k]
            for k in sorted(self._entries)
            if entry_matches(self._entries[k], filters)
        ]

    async def fetch_by_id(self, entry_id: int) -> CatalogEntry | None:
        return self._entries.get(entry_id)

    async def increment_request_count(self, entry_id: int) -> None:
        entry = self._entries.get(entry_id)
        if entry is None:
            return
        self._entries[entry_id] = entry.model_copy(
            update={
                "request_count": entry.request_count + 1,
                "total_requests": entry.total_requests + 1,
            }
        )

    async def list_categories(self) -> list[str]:
        return sorted({e.category for e in self._entries.values() if e.category})

    async def add_entry(self, entry: CatalogEntry) -> CatalogEntry:
        self._entries[entry.id] = entry
        return entry

    def __len__(self) -> int:
        return len(self._entries)
