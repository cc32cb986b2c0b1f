# src/logging/logger.py — v3
"""Logger factory with JSON and text formatters.

Every module logs through `logging.getLogger(__name__)`, which lands under
the "maktaba" root configured here. Request context (see logging.context)
is attached by the formatters, not by callers.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from maktaba.logging.context import LogContext, get_context

if TYPE_CHECKING:
    from maktaba.config.settings import Settings

ROOT_LOGGER = "maktaba"

_QUERY_PREVIEW = 20


class JsonFormatter(logging.Formatter):
    """One JSON object per line; request context under "context"."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            payload["context"] = context
        data = getattr(record, "data", None)
        if data:
            payload["data"] = data
        if record.exc_info and record.exc_info[1] is not None:
            payload["exception"] = self.formatException(record.exc_info)
        # Arabic and Persian text stays readable in the output
        return json.dumps(payload, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Single-line human-readable output for the CLI and development."""

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, timezone.utc)
        line = (
            f"{stamp:%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"
            f"{_context_suffix(get_context())} — {record.getMessage()}"
        )
        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _context_suffix(ctx: LogContext) -> str:
    suffix = ""
    if ctx.request_id:
        suffix += f" [{ctx.request_id}]"
    if ctx.user_id is not None:
        suffix += f" (user {ctx.user_id})"
    if ctx.query:
        preview = ctx.query[:_QUERY_PREVIEW]
        suffix += f" q={preview!r}"
    return suffix


_FORMATTERS: dict[str, type[logging.Formatter]] = {
    "json": JsonFormatter,
    "text": TextFormatter,
}


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
    rotation: str = "5MB",
    retention: int = 5,
    stream: TextIO | None = None,
) -> None:
    """(Re)configure the maktaba root logger; previous handlers are dropped.

    Args:
        level: DEBUG, INFO, WARNING or ERROR.
        log_format: "json" or "text".
        log_file: Optional rotating log file.
        rotation: Size that triggers rotation, e.g. "5MB".
        retention: Rotated files kept next to log_file.
        stream: Console stream. Defaults to stdout.

    Raises:
        ValueError: Unknown log_format.
    """
    try:
        formatter = _FORMATTERS[log_format]()
    except KeyError:
        raise ValueError(f"Unknown log format: {log_format!r}") from None

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        from maktaba.logging.handlers import create_rotating_handler

        file_handler = create_rotating_handler(
            log_file, rotation=rotation, retention=retention
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def setup_logging_from_settings(settings: Settings, stream: TextIO | None = None) -> None:
    setup_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
        stream=stream,
    )
