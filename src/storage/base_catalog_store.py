# src/storage/base_catalog_store.py — v1
"""Abstract catalog store interface consumed by the search engine."""

from __future__ import annotations

from abc import ABC, abstractmethod

from maktaba.core.models import CatalogEntry, SearchFilters
from maktaba.search.normalizer import normalize_text


class BaseCatalogStore(ABC):
    """Data-access interface over the persistent catalog.

    Implementations raise StorageError when the backend fails.
    """

    @abstractmethod
    async def fetch_candidates(self, filters: SearchFilters) -> list[CatalogEntry]:
        """Return entries, optionally narrowed by category / author substring."""

    @abstractmethod
    async def fetch_by_id(self, entry_id: int) -> CatalogEntry | None:
        """Return a single entry or None."""

    @abstractmethod
    async def increment_request_count(self, entry_id: int) -> None:
        """Bump request_count and total_requests after a delivery."""

    @abstractmethod
    async def list_categories(self) -> list[str]:
        """Distinct non-empty categories, sorted."""

    @abstractmethod
    async def add_entry(self, entry: CatalogEntry) -> CatalogEntry:
        """Insert or replace an entry (used for seeding and imports)."""


def entry_matches(entry: CatalogEntry, filters: SearchFilters) -> bool:
    """Apply category equality and author substring filters in Python.

    The author check compares normalized, lower-cased text on both sides.
    """
    if filters.category and entry.category != filters.category:
        return False
    if filters.author_substring:
        needle = normalize_text(filters.author_substring).lower()
        if needle not in normalize_text(entry.author).lower():
            return False
    return True
