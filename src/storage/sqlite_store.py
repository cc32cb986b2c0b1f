# src/storage/sqlite_store.py — v2
"""SQLite-backed catalog store (CATALOG_BACKEND=sqlite).

Uses stdlib sqlite3. Each call opens its own connection inside a worker
thread so the event loop only waits on I/O. File locators are stored
`|`-separated in the file_path column. The author filter runs on folded
text through the fold_text() SQL function, so it agrees with entry_matches.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from maktaba.core.errors import StorageError
from maktaba.core.models import PARTS_SEPARATOR, CatalogEntry, SearchFilters
from maktaba.search.normalizer import normalize_text
from maktaba.storage.base_catalog_store import BaseCatalogStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS books (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    author TEXT NOT NULL,
    category TEXT,
    file_path TEXT,
    request_count INTEGER NOT NULL DEFAULT 0,
    total_requests INTEGER NOT NULL DEFAULT 0,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_books_title ON books(title);
CREATE INDEX IF NOT EXISTS idx_books_author ON books(author);
CREATE INDEX IF NOT EXISTS idx_books_category ON books(category);
CREATE INDEX IF NOT EXISTS idx_books_request_count ON books(request_count DESC);
"""

_COLUMNS = "id, title, author, category, file_path, request_count, total_requests"


class SqliteCatalogStore(BaseCatalogStore):
    """Catalog store over a local SQLite file."""

    def __init__(self, db_path: Path | str, create_schema: bool = True) -> None:
        self._db_path = Path(db_path).expanduser()
        if create_schema:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._run_sync("init_schema", lambda conn: conn.executescript(_SCHEMA))

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def fetch_candidates(self, filters: SearchFilters) -> list[CatalogEntry]:
        sql = f"SELECT {_COLUMNS} FROM books WHERE 1=1"
        params: list[object] = []
        if filters.category:
            sql += " AND category = ?"
            params.append(filters.category)
        if filters.author_substring:
            sql += " AND instr(fold_text(author), ?) > 0"
            params.append(_fold(filters.author_substring))
        sql += " ORDER BY id"

        rows = await self._run(
            "fetch_candidates", lambda conn: conn.execute(sql, params).fetchall()
        )
        return [_row_to_entry(r) for r in rows]

    async def fetch_by_id(self, entry_id: int) -> CatalogEntry | None:
        row = await self._run(
            "fetch_by_id",
            lambda conn: conn.execute(
                f"SELECT {_COLUMNS} FROM books WHERE id = ?", (entry_id,)
            ).fetchone(),
        )
        return _row_to_entry(row) if row else None

    async def increment_request_count(self, entry_id: int) -> None:
        def _update(conn: sqlite3.Connection) -> None:
            conn.execute(
                """UPDATE books
                   SET request_count = request_count + 1,
                       total_requests = total_requests + 1,
                       updated_at = CURRENT_TIMESTAMP
                   WHERE id = ?""",
                (entry_id,),
            )

        await self._run("increment_request_count", _update)

    async def list_categories(self) -> list[str]:
        rows = await self._run(
            "list_categories",
            lambda conn: conn.execute(
                "SELECT DISTINCT category FROM books "
                "WHERE category IS NOT NULL AND category != '' ORDER BY category"
            ).fetchall(),
        )
        return [r[0] for r in rows]

    async def add_entry(self, entry: CatalogEntry) -> CatalogEntry:
        def _insert(conn: sqlite3.Connection) -> None:
            conn.execute(
                """INSERT OR REPLACE INTO books
                   (id, title, author, category, file_path,
                    request_count, total_requests)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    entry.id,
                    entry.title,
                    entry.author,
                    entry.category,
                    PARTS_SEPARATOR.join(entry.parts),
                    entry.request_count,
                    entry.total_requests,
                ),
            )

        await self._run("add_entry", _insert)
        return entry

    # --- internals ---

    async def _run(self, operation: str, fn: Callable[[sqlite3.Connection], T]) -> T:
        return await asyncio.to_thread(self._run_sync, operation, fn)

    def _run_sync(self, operation: str, fn: Callable[[sqlite3.Connection], T]) -> T:
        try:
            conn = sqlite3.connect(str(self._db_path))
        except sqlite3.Error as e:
            logger.error("Cannot open catalog database %s: %s", self._db_path, e)
            raise StorageError(operation, e) from e
        try:
            conn.create_function("fold_text", 1, _fold, deterministic=True)
            with conn:
                return fn(conn)
        except sqlite3.Error as e:
            logger.error("Catalog store %s failed: %s", operation, e)
            raise StorageError(operation, e) from e
        finally:
            conn.close()


def _fold(text: str | None) -> str:
    """Same comparison form as entry_matches: normalized, lower-cased."""
    return normalize_text(text or "").lower()


def _row_to_entry(row: tuple) -> CatalogEntry:
    return CatalogEntry(
        id=row[0],
        title=row[1],
        author=row[2],
        category=row[3],
        parts=CatalogEntry.split_parts(row[4]),
        request_count=row[5] or 0,
        total_requests=row[6] or 0,
    )
