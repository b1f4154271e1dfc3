"""DOCX text extraction via python-docx."""

from __future__ import annotations

import io

from docx import Document

from rubricscore.extraction.base import TextExtractor


class DocxTextExtractor(TextExtractor):
    name = "docx"
    extensions = frozenset({".docx"})

    def extract(self, data: bytes) -> str:
        document = Document(io.BytesIO(data))
        lines = [paragraph.text for paragraph in document.paragraphs]
        # Rubrics are frequently laid out as tables.
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" | ".join(cells))
        return "\n".join(lines)
