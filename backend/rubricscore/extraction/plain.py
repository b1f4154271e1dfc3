"""Plain-text extraction."""

from rubricscore.extraction.base import TextExtractor


class PlainTextExtractor(TextExtractor):
    name = "txt"
    extensions = frozenset({".txt"})

    def extract(self, data: bytes) -> str:
        return data.decode("utf-8-sig", errors="replace")
