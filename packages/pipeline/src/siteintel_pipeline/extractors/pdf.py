"""
extractors/pdf.py — plain-text extraction from uploaded PDFs.
"""

from __future__ import annotations

import io

import pdfplumber
import structlog

from siteintel_shared.errors import ParseError

log = structlog.get_logger(__name__)


def extract_text(data: bytes) -> str:
    """
    Concatenate the text of every page, separated by newlines.

    Raises:
        ParseError: the bytes are not a readable PDF.
    """
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as exc:
        log.error("pdf_parse_failed", error=str(exc), size=len(data))
        raise ParseError("Error parsing PDF file.", details={"error": str(exc)}) from exc

    text = "\n".join(pages)
    log.debug("pdf_text_extracted", pages=len(pages), chars=len(text))
    return text
