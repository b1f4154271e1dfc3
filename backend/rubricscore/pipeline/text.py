"""Canonicalization of document and pasted text."""

from __future__ import annotations

import re
import unicodedata

_LINE_BREAKS = re.compile(r"\r\n?")
_TRAILING_SPACE = re.compile(r"[^\S\n]+$", re.MULTILINE)
_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Normalize line endings, trailing whitespace and blank-line runs."""

    normalized = unicodedata.normalize("NFC", text)
    normalized = _LINE_BREAKS.sub("\n", normalized)
    normalized = _TRAILING_SPACE.sub("", normalized)
    normalized = _EXTRA_BLANK_LINES.sub("\n\n", normalized)
    return normalized.strip()
