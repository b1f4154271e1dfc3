"""PDF text extraction via pdfplumber."""

from __future__ import annotations

import io

import pdfplumber

from rubricscore.extraction.base import TextExtractor


class PdfTextExtractor(TextExtractor):
    name = "pdf"
    extensions = frozenset({".pdf"})

    def extract(self, data: bytes) -> str:
        pages: list[str] = []
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            for page in pdf.pages:
                text = page.extract_text() or ""
                if text.strip():
                    pages.append(text)
        return "\n\n".join(pages)
