"""Free-text normalization helpers for city and neighborhood matching."""

from __future__ import annotations

import unicodedata
from typing import Optional


def normalize_text(value: Optional[str]) -> str:
    """Lowercase, strip diacritics and trim (inner whitespace runs collapse to one space)."""

    if not value:
        return ""
    decomposed = unicodedata.normalize("NFD", value.lower())
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return " ".join(stripped.split())


def texts_match(left: Optional[str], right: Optional[str]) -> bool:
    """Exact or either-direction substring match of normalized values. Empty never matches."""

    a = normalize_text(left)
    b = normalize_text(right)
    if not a or not b:
        return False
    return a == b or a in b or b in a
