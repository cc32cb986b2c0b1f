# src/logging/context.py — v2
"""Per-request logging context: request_id, user_id, query.

Values live in contextvars, so concurrent searches on one event loop each
see their own context.
"""

from __future__ import annotations

import contextvars
import uuid
from dataclasses import dataclass
from typing import Any

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_user_id: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "user_id", default=None
)
_query: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "query", default=None
)


@dataclass
class LogContext:
    """Snapshot of the current request context."""

    request_id: str | None = None
    user_id: int | None = None
    query: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    return LogContext(
        request_id=_request_id.get(),
        user_id=_user_id.get(),
        query=_query.get(),
    )


def set_request_context(
    user_id: int | None = None,
    query: str | None = None,
    request_id: str | None = None,
) -> str:
    """Set context for one inbound request. Returns the request id used."""
    rid = request_id or uuid.uuid4().hex[:12]
    _request_id.set(rid)
    _user_id.set(user_id)
    _query.set(query)
    return rid


def clear_context() -> None:
    _request_id.set(None)
    _user_id.set(None)
    _query.set(None)
