# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

No module redefines these types — all imports come from core.models.
"""

from __future__ import annotations

import json
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SortBy = Literal["relevance", "popularity", "name"]

PARTS_SEPARATOR = "|"


# === CATALOG ===


class CatalogEntry(BaseModel):
    """A catalog document as stored by the catalog store. Read-only to search."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0)
    title: str
    author: str
    category: str | None = None
    parts: list[str] = Field(default_factory=list)
    request_count: int = Field(default=0, ge=0)
    total_requests: int = Field(default=0, ge=0)

    @property
    def parts_count(self) -> int:
        return len(self.parts)

    @classmethod
    def split_parts(cls, joined: str | None) -> list[str]:
        """Split a stored `a|b|c` locator column into ordered parts."""
        if not joined:
            return []
        return [p for p in joined.split(PARTS_SEPARATOR) if p]


# === SEARCH ===


class SearchFilters(BaseModel):
    """Constraints the search engine asks the store to apply."""

    model_config = ConfigDict(frozen=True)

    category: str | None = None
    author_substring: str | None = None


class SearchOptions(BaseModel):
    """Immutable search parameters; also part of the cache key.

    limit=None means SEARCH_DEFAULT_LIMIT; the engine fills it in before
    building the cache key.
    """

    model_config = ConfigDict(frozen=True)

    category: str | None = None
    author: str | None = None
    sort_by: SortBy = "relevance"
    limit: int | None = Field(default=None, ge=1)

    def canonical_key(self) -> str:
        """Deterministic serialization: equal option sets give equal strings."""
        return json.dumps(
            self.model_dump(mode="json"),
            sort_keys=True,
            ensure_ascii=False,
            separators=(",", ":"),
        )

    def to_filters(self) -> SearchFilters:
        return SearchFilters(category=self.category, author_substring=self.author)


class ScoredEntry(BaseModel):
    """A catalog entry paired with its relevance score for one query."""

    model_config = ConfigDict(frozen=True)

    entry: CatalogEntry
    score: float = Field(ge=0.0)
    exact_id_match: bool = False

    @property
    def id(self) -> int:
        return self.entry.id
