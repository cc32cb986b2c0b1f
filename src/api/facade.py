# src/api/facade.py — v2
"""Public API facade — wires settings, store and cache into a SearchEngine.

Usage:
    from maktaba.api.facade import create_search_engine
    engine = create_search_engine()
    results = await engine.search("فقه")

Build the engine once at process start and share it: the cache lives on
the engine instance.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from maktaba.cache.cache_factory import create_result_cache
from maktaba.config.settings import Settings
from maktaba.core.models import ScoredEntry, SearchOptions
from maktaba.logging.context import set_request_context
from maktaba.search.engine import SearchEngine
from maktaba.storage.store_factory import create_catalog_store

if TYPE_CHECKING:
    from maktaba.cache.base_result_cache import BaseResultCache
    from maktaba.storage.base_catalog_store import BaseCatalogStore

logger = logging.getLogger(__name__)


def create_search_engine(
    settings: Settings | None = None,
    store: BaseCatalogStore | None = None,
    cache: BaseResultCache | None = None,
) -> SearchEngine:
    """Build a SearchEngine from configuration.

    Args:
        settings: Global settings. Loaded from .env if None.
        store: Catalog store. Built from CATALOG_BACKEND if None.
        cache: Result cache. Built from CACHE_* settings if None.

    Returns:
        A ready SearchEngine with an empty cache.
    """
    settings = settings or Settings()
    store = store if store is not None else create_catalog_store(settings)
    cache = cache if cache is not None else create_result_cache(settings)
    logger.info(
        "Search engine ready: backend=%s, cache_enabled=%s, threshold=%.2f",
        settings.catalog_backend, settings.cache_enabled,
        settings.search_fuzzy_threshold,
    )
    return SearchEngine(store=store, cache=cache, settings=settings)


async def search_for_user(
    engine: SearchEngine,
    user_id: int,
    query: str,
    options: SearchOptions | None = None,
) -> list[ScoredEntry]:
    """Run one user's search with request context attached to every log line."""
    set_request_context(user_id=user_id, query=query)
    return await engine.search(query, options)
