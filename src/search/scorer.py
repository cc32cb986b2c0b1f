# src/search/scorer.py — v1
"""Relevance scoring of one catalog entry against a normalized query.

Per-field similarity ladder (case-insensitive):
    exact match        -> 1.0
    prefix either way  -> 0.9
    substring either way -> 0.7
    otherwise          -> 1 - levenshtein / max(len)

Total = title_sim * title_weight + author_sim * author_weight + popularity boost.
The boost is additive and unconditional, so a popular entry can cross the
fuzzy threshold on popularity alone.
"""

from __future__ import annotations

import logging

from rapidfuzz.distance import Levenshtein

from maktaba.core.models import CatalogEntry
from maktaba.search.normalizer import normalize_text

logger = logging.getLogger(__name__)

EXACT_SIMILARITY = 1.0
PREFIX_SIMILARITY = 0.9
SUBSTRING_SIMILARITY = 0.7

DEFAULT_TITLE_WEIGHT = 0.7
DEFAULT_AUTHOR_WEIGHT = 0.3
DEFAULT_POPULARITY_DIVISOR = 100.0
DEFAULT_POPULARITY_CAP = 0.1


def edit_distance(a: str, b: str) -> int:
    """Unit-cost insert/delete/substitute distance. Symmetric."""
    return Levenshtein.distance(a, b)


def string_similarity(a: str, b: str) -> float:
    """Similarity in [0, 1] between two strings, compared lower-cased."""
    s1 = a.lower()
    s2 = b.lower()

    if s1 == s2:
        return EXACT_SIMILARITY
    if s1.startswith(s2) or s2.startswith(s1):
        return PREFIX_SIMILARITY
    if s2 in s1 or s1 in s2:
        return SUBSTRING_SIMILARITY

    max_len = max(len(s1), len(s2))
    if max_len == 0:
        return EXACT_SIMILARITY
    return 1.0 - edit_distance(s1, s2) / max_len


def popularity_boost(
    request_count: int,
    divisor: float = DEFAULT_POPULARITY_DIVISOR,
    cap: float = DEFAULT_POPULARITY_CAP,
) -> float:
    """min(request_count / divisor, cap)."""
    return min(request_count / divisor, cap)


class SimilarityScorer:
    """Weighted title/author similarity plus popularity boost.

    Pure and deterministic: the same (entry, query) pair always yields the
    same score.
    """

    def __init__(
        self,
        title_weight: float = DEFAULT_TITLE_WEIGHT,
        author_weight: float = DEFAULT_AUTHOR_WEIGHT,
        popularity_divisor: float = DEFAULT_POPULARITY_DIVISOR,
        popularity_cap: float = DEFAULT_POPULARITY_CAP,
    ) -> None:
        self.title_weight = title_weight
        self.author_weight = author_weight
        self.popularity_divisor = popularity_divisor
        self.popularity_cap = popularity_cap
        if abs(title_weight + author_weight - 1.0) > 1e-9:
            logger.warning(
                "Field weights sum to %.3f, not 1.0 (title=%.3f, author=%.3f)",
                title_weight + author_weight, title_weight, author_weight,
            )

    def title_similarity(self, entry: CatalogEntry, normalized_query: str) -> float:
        return string_similarity(normalize_text(entry.title), normalized_query)

    def author_similarity(self, entry: CatalogEntry, normalized_query: str) -> float:
        return string_similarity(normalize_text(entry.author), normalized_query)

    def score(self, entry: CatalogEntry, normalized_query: str) -> float:
        """Combined relevance of *entry* for an already-normalized query."""
        base = (
            self.title_similarity(entry, normalized_query) * self.title_weight
            + self.author_similarity(entry, normalized_query) * self.author_weight
        )
        return base + popularity_boost(
            entry.request_count, self.popularity_divisor, self.popularity_cap
        )
