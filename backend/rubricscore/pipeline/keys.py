"""Canonical matching keys for criterion names."""

from __future__ import annotations

import re
import unicodedata

_NON_ALPHANUMERIC = re.compile(r"[\W_]+")
_WHITESPACE = re.compile(r"\s+")


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return unicodedata.normalize("NFKC", stripped)


def normalize_criterion_key(name: str) -> str:
    """Return the matching key for a criterion display name.

    Names that differ only in case, accents, or punctuation and spacing map to
    the same key. A name with no letters or digits maps to ``""``, which is
    never a valid match key.
    """

    key = unicodedata.normalize("NFKC", name).lower()
    key = _strip_accents(key)
    key = _NON_ALPHANUMERIC.sub(" ", key)
    return _WHITESPACE.sub(" ", key).strip()
