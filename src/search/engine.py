# src/search/engine.py — v2
"""Search orchestrator: normalize, validate, cache, fetch, rank.

Usage:
    engine = SearchEngine(store, cache=create_result_cache(settings), settings=settings)
    results = await engine.search("فقه", SearchOptions(sort_by="popularity"))

Flow per call:
  1. Normalize and validate the query (QueryValidationError, nothing touched)
  2. Build the cache key and return a cached list on hit
  3. Fetch candidates from the store (StorageError propagates, no retry)
  4. All-digit query matching an entry id -> that entry alone
  5. Otherwise score, drop below threshold, sort, truncate
  6. Cache the result list (a refused write is not an error)

The engine never increments request counters; delivery code does that.
"""

from __future__ import annotations

import logging

from maktaba.cache.base_result_cache import BaseResultCache
from maktaba.cache.memory_cache import MemoryResultCache
from maktaba.cache.models import CacheStats
from maktaba.config.settings import Settings
from maktaba.core.errors import StorageError
from maktaba.core.models import CatalogEntry, ScoredEntry, SearchOptions
from maktaba.search.normalizer import collation_key, normalize_text
from maktaba.search.scorer import SimilarityScorer
from maktaba.search.validator import validate_query
from maktaba.storage.base_catalog_store import BaseCatalogStore, entry_matches

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "search"


class SearchEngine:
    """Ranks catalog entries for a free-text query."""

    def __init__(
        self,
        store: BaseCatalogStore,
        cache: BaseResultCache | None = None,
        scorer: SimilarityScorer | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings()
        self._store = store
        self._cache = cache if cache is not None else MemoryResultCache(enabled=False)
        self._scorer = scorer or SimilarityScorer(
            title_weight=settings.search_title_weight,
            author_weight=settings.search_author_weight,
            popularity_divisor=settings.search_popularity_divisor,
            popularity_cap=settings.search_popularity_cap,
        )
        self._threshold = settings.search_fuzzy_threshold
        self._default_limit = settings.search_default_limit
        self._max_limit = settings.search_max_limit
        self._max_query_length = settings.search_max_query_length

    @property
    def store(self) -> BaseCatalogStore:
        return self._store

    @property
    def cache(self) -> BaseResultCache:
        return self._cache

    def default_options(self) -> SearchOptions:
        return SearchOptions(limit=self._default_limit)

    def resolve_options(self, options: SearchOptions | None = None) -> SearchOptions:
        """Fill an unset limit from configuration."""
        if options is None:
            return self.default_options()
        if options.limit is None:
            return options.model_copy(update={"limit": self._default_limit})
        return options

    def cache_key_for(self, query: str, options: SearchOptions | None = None) -> str:
        """Cache key for a raw query; normalizes but does not validate."""
        options = self.resolve_options(options)
        return _build_key(normalize_text(query), options)

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def invalidate(self, query: str, options: SearchOptions | None = None) -> bool:
        """Drop one cached result. Returns True if something was removed."""
        return self._cache.delete(self.cache_key_for(query, options)) > 0

    def flush_cache(self) -> None:
        self._cache.flush()

    async def search(
        self, query: str, options: SearchOptions | None = None
    ) -> list[ScoredEntry]:
        """Return at most options.limit entries ranked for *query*.

        Raises:
            QueryValidationError: Empty, too long, Latin letters or emoji.
            StorageError: The catalog store failed.
        """
        options = self.resolve_options(options)
        normalized = validate_query(normalize_text(query), self._max_query_length)
        key = _build_key(normalized, options)

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Returning cached search results for %r", normalized)
            return cached

        candidates = await self._fetch_candidates(options)
        filters = options.to_filters()
        candidates = [c for c in candidates if entry_matches(c, filters)]

        if not candidates:
            self._store_result(key, [])
            return []

        exact = self._exact_id_match(normalized, candidates)
        if exact is not None:
            result = [ScoredEntry(entry=exact, score=1.0, exact_id_match=True)]
            self._store_result(key, result)
            return result

        scored = [
            ScoredEntry(entry=c, score=self._safe_score(c, normalized))
            for c in candidates
        ]
        matches = [s for s in scored if s.score >= self._threshold]
        _sort_results(matches, options.sort_by)
        results = matches[: min(options.limit, self._max_limit)]

        self._store_result(key, results)
        logger.info(
            "Search completed: query=%r, results=%d, candidates=%d",
            normalized, len(results), len(candidates),
            extra={"data": {
                "query": normalized,
                "results_count": len(results),
                "total_candidates": len(candidates),
                "sort_by": options.sort_by,
            }},
        )
        return results

    # --- internals ---

    async def _fetch_candidates(self, options: SearchOptions) -> list[CatalogEntry]:
        try:
            return await self._store.fetch_candidates(options.to_filters())
        except StorageError:
            logger.error("Catalog store unavailable during search")
            raise
        except Exception as e:
            logger.error("Catalog store failed during search: %s", e)
            raise StorageError("fetch_candidates", e) from e

    @staticmethod
    def _exact_id_match(
        normalized: str, candidates: list[CatalogEntry]
    ) -> CatalogEntry | None:
        if not (normalized.isascii() and normalized.isdigit()):
            return None
        wanted = int(normalized)
        return next((c for c in candidates if c.id == wanted), None)

    def _safe_score(self, entry: CatalogEntry, normalized: str) -> float:
        try:
            return self._scorer.score(entry, normalized)
        except Exception:
            # score 0 for this entry only
            logger.warning(
                "Scoring failed for entry %s, using 0.0", entry.id, exc_info=True
            )
            return 0.0

    def _store_result(self, key: str, results: list[ScoredEntry]) -> None:
        if not self._cache.set(key, results):
            logger.debug("Result not cached for key: %s", key)


def _build_key(normalized_query: str, options: SearchOptions) -> str:
    return f"{CACHE_KEY_PREFIX}:{normalized_query}:{options.canonical_key()}"


def _sort_results(results: list[ScoredEntry], sort_by: str) -> None:
    """In-place stable sort by the requested mode."""
    if sort_by == "popularity":
        results.sort(key=lambda s: s.entry.request_count, reverse=True)
    elif sort_by == "name":
        results.sort(key=lambda s: collation_key(s.entry.title))
    else:
        results.sort(key=lambda s: s.score, reverse=True)
