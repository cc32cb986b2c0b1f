# src/storage/store_factory.py — v1
"""Factory: instantiate the catalog store from configuration."""

from __future__ import annotations

from maktaba.config.settings import Settings
from maktaba.storage.base_catalog_store import BaseCatalogStore
from maktaba.storage.memory_store import InMemoryCatalogStore


def create_catalog_store(settings: Settings) -> BaseCatalogStore:
    """Create the catalog store selected by CATALOG_BACKEND.

    Raises:
        ValueError: If the backend is not supported.
    """
    if settings.catalog_backend == "memory":
        return InMemoryCatalogStore()

    if settings.catalog_backend == "sqlite":
        from maktaba.storage.sqlite_store import SqliteCatalogStore
        return SqliteCatalogStore(db_path=settings.catalog_db_path)

    raise ValueError(f"Unsupported catalog backend: {settings.catalog_backend!r}")
