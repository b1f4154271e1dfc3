"""Document extractor dispatcher and extracted-text sanity checks."""

from __future__ import annotations

import logging
from pathlib import PurePath

from rubricscore.errors import TextExtractionFailed, UnsupportedFileType
from rubricscore.extraction.base import TextExtractor
from rubricscore.extraction.docx_document import DocxTextExtractor
from rubricscore.extraction.pdf import PdfTextExtractor
from rubricscore.extraction.plain import PlainTextExtractor
from rubricscore.pipeline.text import normalize_text

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 20
MIN_ALNUM_RATIO = 0.5

_EXTRACTORS: tuple[TextExtractor, ...] = (PdfTextExtractor(), DocxTextExtractor(), PlainTextExtractor())


def allowed_extensions() -> list[str]:
    return sorted(ext for extractor in _EXTRACTORS for ext in extractor.extensions)


def get_extractor(filename: str, field: str | None = None) -> TextExtractor:
    extension = PurePath(filename).suffix.lower()
    for extractor in _EXTRACTORS:
        if extension in extractor.extensions:
            return extractor
    raise UnsupportedFileType(
        f"Unsupported file type '{extension or 'unknown'}' ({filename}). Use one of: {', '.join(allowed_extensions())}",
        field=field,
    )


def check_extracted_text(text: str, filename: str, field: str | None = None) -> str:
    """Reject text too short or too symbol-heavy to be a readable document."""

    visible = [char for char in text if not char.isspace()]
    if len(text) < MIN_TEXT_LENGTH or not visible:
        raise TextExtractionFailed(f"Not enough readable text found in {filename}", field=field)

    ratio = sum(1 for char in visible if char.isalnum()) / len(visible)
    if ratio < MIN_ALNUM_RATIO:
        raise TextExtractionFailed(f"Extracted text from {filename} looks unreadable", field=field)
    return text


def extract_document(filename: str, data: bytes, field: str | None = None) -> str:
    """Extract, normalize and sanity-check the text of an uploaded document."""

    extractor = get_extractor(filename, field=field)
    if not data:
        raise TextExtractionFailed(f"File is empty: {filename or 'unnamed'}", field=field)

    try:
        raw = extractor.extract(data)
    except Exception as exc:
        logger.warning(
            "document extraction failed",
            extra={"stage": "extract_text", "extractor": extractor.name, "document": filename, "error": type(exc).__name__},
        )
        raise TextExtractionFailed(f"Invalid or unreadable {extractor.name.upper()} file: {filename}", field=field) from exc

    return check_extracted_text(normalize_text(raw), filename, field=field)
