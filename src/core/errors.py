# src/core/errors.py — v1
"""Error taxonomy for search callers.

QueryValidationError and StorageError reach the caller; CacheWriteFailure
is only raised on explicit request since a failed cache write never
affects search results.
"""

from __future__ import annotations

from typing import Literal

ValidationReason = Literal["empty", "too_long", "latin_letters", "emoji"]


class MaktabaError(Exception):
    """Base class for all maktaba errors."""


class QueryValidationError(MaktabaError, ValueError):
    """Search query rejected before any storage access."""

    def __init__(self, reason: ValidationReason, query: str, detail: str = "") -> None:
        self.reason = reason
        self.query = query
        message = f"Invalid search query ({reason})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class StorageError(MaktabaError):
    """The catalog store failed to answer."""

    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.cause = cause
        message = f"Catalog store failed during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class CacheWriteFailure(MaktabaError):
    """A result could not be stored in the cache."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Could not cache result for key {key!r}")
