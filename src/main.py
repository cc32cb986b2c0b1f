# src/main.py — v3
"""CLI entry point — search and browse a catalog database.

Usage:
    maktaba search <query> [--category C] [--author A] [--sort MODE] [--limit N]
    maktaba show <id>
    maktaba popular [--category C] [--limit N]
    maktaba similar <id> [--limit N]
    maktaba categories
    maktaba add --title T --author A [--id N] [--category C] [--part P ...]
    maktaba init-db
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from maktaba.config.settings import ConfigurationError, Settings
from maktaba.core.errors import QueryValidationError, StorageError
from maktaba.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_QUERY = 2
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        args.settings = _load_settings(args)
    except (ConfigurationError, ValidationError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    _setup_logging(args.settings, args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_FAILURE

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except QueryValidationError as exc:
        print(f"Invalid query: {exc}", file=sys.stderr)
        return EXIT_INVALID_QUERY
    except StorageError as exc:
        logger.error("Catalog unavailable: %s", exc)
        return EXIT_FAILURE
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return EXIT_FAILURE


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="maktaba",
        description=f"maktaba v{__version__} — Arabic/Persian catalog search",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--db", type=Path, default=None,
        help="Catalog SQLite file (default: CATALOG_DB_PATH)",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- search ---
    p_search = subparsers.add_parser("search", help="Fuzzy search the catalog")
    p_search.add_argument("query", help="Search text (Arabic/Persian, or an id)")
    p_search.add_argument("--category", default=None, help="Exact category filter")
    p_search.add_argument("--author", default=None, help="Author substring filter")
    p_search.add_argument(
        "--sort", dest="sort_by", choices=["relevance", "popularity", "name"],
        default="relevance", help="Result ordering (default: relevance)",
    )
    p_search.add_argument(
        "--limit", type=_positive_int, default=None,
        help="Maximum results (default: SEARCH_DEFAULT_LIMIT)",
    )
    p_search.set_defaults(func=_cmd_search)

    # --- show ---
    p_show = subparsers.add_parser("show", help="Show one entry by id")
    p_show.add_argument("entry_id", type=int, help="Entry id")
    p_show.set_defaults(func=_cmd_show)

    # --- popular ---
    p_popular = subparsers.add_parser("popular", help="Most requested entries")
    p_popular.add_argument("--category", default=None)
    p_popular.add_argument("--limit", type=_positive_int, default=10)
    p_popular.set_defaults(func=_cmd_popular)

    # --- similar ---
    p_similar = subparsers.add_parser(
        "similar", help="Entries sharing author or category",
    )
    p_similar.add_argument("entry_id", type=int, help="Source entry id")
    p_similar.add_argument("--limit", type=_positive_int, default=5)
    p_similar.set_defaults(func=_cmd_similar)

    # --- categories ---
    p_categories = subparsers.add_parser("categories", help="List categories")
    p_categories.set_defaults(func=_cmd_categories)

    # --- add ---
    p_add = subparsers.add_parser("add", help="Add or replace a catalog entry")
    p_add.add_argument("--id", dest="entry_id", type=int, default=None)
    p_add.add_argument("--title", required=True)
    p_add.add_argument("--author", required=True)
    p_add.add_argument("--category", default=None)
    p_add.add_argument(
        "--part", dest="parts", action="append", default=[],
        help="File locator; repeat for multi-part entries",
    )
    p_add.set_defaults(func=_cmd_add)

    # --- init-db ---
    p_init = subparsers.add_parser("init-db", help="Create the catalog schema")
    p_init.set_defaults(func=_cmd_init_db)

    return parser


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _load_settings(args: argparse.Namespace) -> Settings:
    """.env settings, with --db forcing the SQLite backend at that path."""
    settings = Settings()
    if args.db is not None:
        settings = settings.model_copy(
            update={"catalog_backend": "sqlite", "catalog_db_path": args.db}
        )
    return settings


def _open_store(args: argparse.Namespace):
    from maktaba.storage.store_factory import create_catalog_store

    return create_catalog_store(args.settings)


async def _cmd_search(args: argparse.Namespace) -> int:
    """Run one search and print the ranked results."""
    from maktaba.api.facade import create_search_engine
    from maktaba.core.models import SearchOptions

    engine = create_search_engine(args.settings)
    options = SearchOptions(
        category=args.category,
        author=args.author,
        sort_by=args.sort_by,
        limit=args.limit,
    )

    results = await engine.search(args.query, options)
    if not results:
        print(f"No results for {args.query!r}")
        return EXIT_OK

    for rank, scored in enumerate(results, start=1):
        e = scored.entry
        tag = " (id match)" if scored.exact_id_match else ""
        print(f"{rank:2d}. [{e.id}] {e.title} — {e.author}  score={scored.score:.3f}{tag}")
    return EXIT_OK


async def _cmd_show(args: argparse.Namespace) -> int:
    """Print one entry in full."""
    store = _open_store(args)
    entry = await store.fetch_by_id(args.entry_id)
    if entry is None:
        print(f"No entry with id {args.entry_id}")
        return EXIT_FAILURE

    print(f"\nEntry {entry.id}:")
    print(f"  Title:     {entry.title}")
    print(f"  Author:    {entry.author}")
    print(f"  Category:  {entry.category or '-'}")
    print(f"  Parts:     {entry.parts_count}")
    print(f"  Requests:  {entry.request_count} (total {entry.total_requests})")
    return EXIT_OK


async def _cmd_popular(args: argparse.Namespace) -> int:
    from maktaba.search.discovery import popular_entries

    entries = await popular_entries(
        _open_store(args), limit=args.limit, category=args.category,
    )
    _print_entries(entries)
    return EXIT_OK


async def _cmd_similar(args: argparse.Namespace) -> int:
    from maktaba.search.discovery import similar_entries

    entries = await similar_entries(_open_store(args), args.entry_id, limit=args.limit)
    _print_entries(entries)
    return EXIT_OK


async def _cmd_categories(args: argparse.Namespace) -> int:
    for category in await _open_store(args).list_categories():
        print(category)
    return EXIT_OK


async def _cmd_add(args: argparse.Namespace) -> int:
    """Insert an entry; without --id the next free id is used."""
    from maktaba.core.models import CatalogEntry, SearchFilters

    store = _open_store(args)
    entry_id = args.entry_id
    if entry_id is None:
        existing = await store.fetch_candidates(SearchFilters())
        entry_id = max((e.id for e in existing), default=0) + 1

    entry = await store.add_entry(
        CatalogEntry(
            id=entry_id,
            title=args.title,
            author=args.author,
            category=args.category,
            parts=args.parts,
        )
    )
    print(f"Added entry {entry.id}")
    return EXIT_OK


async def _cmd_init_db(args: argparse.Namespace) -> int:
    from maktaba.storage.sqlite_store import SqliteCatalogStore

    store = SqliteCatalogStore(db_path=args.settings.catalog_db_path)
    print(f"Catalog schema ready at {store.db_path}")
    return EXIT_OK


def _print_entries(entries: list) -> None:
    if not entries:
        print("No entries")
        return
    for index, e in enumerate(entries, start=1):
        print(f"{index:2d}. [{e.id}] {e.title} — {e.author}  requests={e.request_count}")


def _setup_logging(settings: Settings, verbose: bool) -> None:
    """LOG_* settings, console on stderr so stdout carries only command output.

    -v only raises the level to DEBUG.
    """
    from maktaba.logging.logger import setup_logging_from_settings

    if verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    setup_logging_from_settings(settings, stream=sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
