# src/search/validator.py — v1
"""Search query validation.

Queries must be non-empty Arabic/Persian text (digits allowed) within the
configured length. Latin letters and emoji are rejected.
"""

from __future__ import annotations

import logging
import re

from maktaba.core.errors import QueryValidationError

logger = logging.getLogger(__name__)

_LATIN_RE = re.compile(r"[A-Za-z]")

# Pictographic blocks plus the keycap combiner used in emoji sequences.
# Keycap bases (0-9, #, *) are not listed so digit queries stay valid.
_EMOJI_RE = re.compile(
    "["
    "\U0001F000-\U0001FAFF"  # mahjong .. symbols & pictographs ext-A
    "\u2600-\u27bf"  # misc symbols, dingbats
    "\u2300-\u23ff"  # misc technical (watch, hourglass, ...)
    "\u2b00-\u2bff"  # arrows, stars, squares
    "\u2190-\u21ff"  # arrows
    "\u3030\u303d\u3297\u3299"
    "\u00a9\u00ae\u203c\u2049\u2122\u2139"
    "\u20e3"  # combining keycap
    "\U000E0020-\U000E007F"  # tag sequences (flags)
    "]"
)


def contains_emoji(text: str) -> bool:
    return _EMOJI_RE.search(text) is not None


def validate_query(normalized_query: str, max_length: int) -> str:
    """Validate an already-normalized query and return it.

    Args:
        normalized_query: Output of normalize_text().
        max_length: Maximum accepted length after trimming.

    Returns:
        The query, unchanged.

    Raises:
        QueryValidationError: With reason empty, too_long, latin_letters or emoji.
    """
    query = normalized_query.strip()
    if not query:
        raise QueryValidationError("empty", normalized_query)

    if len(query) > max_length:
        logger.warning("Query too long: %d > %d", len(query), max_length)
        raise QueryValidationError(
            "too_long", query, f"{len(query)} characters, maximum is {max_length}"
        )

    if _LATIN_RE.search(query):
        logger.warning("Query contains Latin letters: %r", query)
        raise QueryValidationError(
            "latin_letters", query, "use Arabic or Persian letters only"
        )

    if contains_emoji(query):
        logger.warning("Query contains emoji")
        raise QueryValidationError("emoji", query)

    return query
