"""Search text normalization."""

from typing import Iterable, Optional

# Turkish case mapping differs from str.lower() for the dotted/dotless I
_TURKISH_LOWER = str.maketrans({"I": "ı", "İ": "i"})

_ASCII_FOLD = str.maketrans(
    {
        "ç": "c",
        "ğ": "g",
        "ı": "i",
        "ö": "o",
        "ş": "s",
        "ü": "u",
        "â": "a",
        "î": "i",
        "û": "u",
    }
)


def normalize_for_search(text: Optional[str]) -> str:
    """Normalize text for case and accent insensitive matching.

    Lowercases with Turkish rules, then folds Turkish letters to ASCII so
    that "is veren" matches "İş Veren".
    """
    if not isinstance(text, str):
        return ""
    lowered = text.translate(_TURKISH_LOWER).lower()
    return lowered.translate(_ASCII_FOLD)


def matches_search(query: Optional[str], *fields: Optional[str]) -> bool:
    """Return True if the normalized query occurs in any of ``fields``.

    An empty query matches everything.
    """
    if not query:
        return True
    needle = normalize_for_search(query)
    return any(needle in normalize_for_search(value) for value in fields if value)


def filter_by_search(items: Iterable, query: Optional[str], key) -> list:
    """Keep items whose ``key(item)`` fields match the query."""
    return [item for item in items if matches_search(query, *key(item))]
