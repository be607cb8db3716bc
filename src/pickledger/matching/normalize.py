"""Name normalization shared by the team and player matchers."""

from __future__ import annotations

import re
import unicodedata

# Letters that NFKD leaves intact but feeds spell with plain ASCII.
_TRANSLITERATIONS = str.maketrans({"ł": "l", "ø": "o", "đ": "d", "ı": "i", "ß": "ss", "æ": "ae"})
_NON_LETTERS = re.compile(r"[^a-z\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str | None) -> str:
    """Lowercase, drop diacritics and punctuation, collapse whitespace."""

    text = (name or "").lower().translate(_TRANSLITERATIONS)
    text = unicodedata.normalize("NFKD", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _NON_LETTERS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def name_tokens(normalized: str) -> list[str]:
    return normalized.split() if normalized else []


def reverse_name_order(normalized: str) -> str:
    """``"wang xinyu"`` -> ``"xinyu wang"``; names without exactly two tokens are returned as-is."""

    tokens = name_tokens(normalized)
    if len(tokens) == 2:
        return f"{tokens[1]} {tokens[0]}"
    return normalized
