"""Document text extractor interfaces."""

from __future__ import annotations

from typing import Protocol


class TextExtractor(Protocol):
    """Document text extractor protocol."""

    name: str
    extensions: frozenset[str]

    def extract(self, data: bytes) -> str:
        """Return the raw text content of a document."""
