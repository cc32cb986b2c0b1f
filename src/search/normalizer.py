# src/search/normalizer.py — v2
"""Canonical text form shared by queries and stored catalog fields.

Folds Arabic-Indic and Persian digits to ASCII and collapses look-alike
Arabic/Persian letters to one representative. Case is left untouched;
the scorer lowercases for comparison only.
"""

from __future__ import annotations

ARABIC_INDIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"
PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"
ASCII_DIGITS = "0123456789"

# Every target is a fixed point of the table, so folding is idempotent.
VARIANT_TABLE: dict[str, str] = {
    "ک": "ك",  # Persian kaf
    "ی": "ي",  # Farsi yeh
    "ى": "ي",  # alef maksura
    "ئ": "ي",  # yeh with hamza
    "ؤ": "و",  # waw with hamza
    "إ": "ا",  # alef with hamza below
    "أ": "ا",  # alef with hamza above
    "آ": "ا",  # alef with madda
    "ة": "ه",  # ta marbuta
}

_DIGIT_TRANSLATION = str.maketrans(
    ARABIC_INDIC_DIGITS + PERSIAN_DIGITS, ASCII_DIGITS * 2
)
_VARIANT_TRANSLATION = str.maketrans(VARIANT_TABLE)


def fold_digits(text: str) -> str:
    """Map ٠-٩ and ۰-۹ to 0-9, leaving every other character as is."""
    return text.translate(_DIGIT_TRANSLATION)


def fold_variants(text: str) -> str:
    """Collapse look-alike letters (kaf, yeh, hamza carriers, ta marbuta)."""
    return text.translate(_VARIANT_TRANSLATION)


def normalize_text(text: str) -> str:
    """Return the canonical comparable form of *text*.

    Never fails; unknown characters pass through unchanged.
    """
    return fold_digits(fold_variants(text)).strip()


# Letter order after fold_variants: Persian alphabet, which extends the
# Arabic one (پ چ ژ گ in place). Hamza first, as in dictionary order.
COLLATION_ALPHABET = "ءابپتثجچحخدذرزژسشصضطظعغفقكگلمنوهي"

# Harakat, superscript alef, tatweel and ZWNJ do not affect order.
_IGNORABLE = "\u064b\u064c\u064d\u064e\u064f\u0650\u0651\u0652\u0670\u0640\u200c"

# Letters move to a private-use block, above Latin and punctuation, keeping
# their alphabet rank; spaces and digits still sort before any letter.
_COLLATION_BASE = 0xF0000
_COLLATION_TRANSLATION = str.maketrans(
    {ch: chr(_COLLATION_BASE + rank) for rank, ch in enumerate(COLLATION_ALPHABET)}
    | {ch: None for ch in _IGNORABLE}
)


def collation_key(text: str) -> str:
    """Sort key giving Arabic/Persian alphabetical order for titles.

    Variants are folded first, so "كتاب" and "کتاب" get the same key.
    """
    return normalize_text(text).casefold().translate(_COLLATION_TRANSLATION)
