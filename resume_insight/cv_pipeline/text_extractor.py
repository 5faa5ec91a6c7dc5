"""Extract raw text from resume files (PDF, DOCX). In-memory only."""

import asyncio
from io import BytesIO
from typing import Any, List

import pdfplumber
from docx import Document as DocxDocument
from docx.table import Table

from resume_insight.errors import TextExtractionError, UnsupportedMediaTypeError
from resume_insight.schemas.document import MediaType
from resume_insight.utils.logger import get_logger

logger = get_logger(__name__)

DOCX_FAILURE_MESSAGE = (
    "Failed to parse DOCX file content. It might be corrupted or in an unsupported format."
)


def _extract_pdf(bytes_io: BytesIO) -> str:
    """Words of each page joined by single spaces; pages joined by newlines."""
    try:
        with pdfplumber.open(bytes_io) as pdf:
            pages = []
            for page in pdf.pages:
                words = page.extract_words()
                pages.append(" ".join(w["text"] for w in words))
    except Exception as e:
        logger.warning("PDF extraction failed: %s", e)
        raise TextExtractionError(
            "Failed to parse PDF file content. It might be corrupted or password protected.",
            {"cause": str(e)},
        ) from e
    return "\n".join(pages).strip()


def _table_lines(table: Table) -> List[str]:
    lines = []
    for row in table.rows:
        cells: List[str] = []
        for cell in row.cells:
            text = cell.text.strip()
            # Merged cells repeat across the row
            if text and (not cells or cells[-1] != text):
                cells.append(text)
        if cells:
            lines.append(" | ".join(cells))
    return lines


def _extract_docx(bytes_io: BytesIO) -> str:
    """Body paragraphs and table rows in document order, separated by blank lines."""
    try:
        doc = DocxDocument(bytes_io)
        parts: List[str] = []
        for block in doc.iter_inner_content():
            if isinstance(block, Table):
                parts.extend(_table_lines(block))
            elif block.text.strip():
                parts.append(block.text)
    except Exception as e:
        logger.warning("DOCX extraction failed: %s", e)
        raise TextExtractionError(DOCX_FAILURE_MESSAGE, {"cause": str(e)}) from e
    return "\n\n".join(parts)


def _coerce_media_type(media_type: Any) -> MediaType:
    if isinstance(media_type, MediaType):
        return media_type
    try:
        return MediaType(media_type)
    except ValueError:
        raise UnsupportedMediaTypeError(media_type) from None


def extract_text(content: bytes, media_type: MediaType) -> str:
    """
    Extract plain text from a PDF or DOCX blob.

    Returns the extracted text, which may be empty. Parser failures raise
    TextExtractionError and unknown media types raise UnsupportedMediaTypeError;
    neither is turned into an empty string.
    """
    kind = _coerce_media_type(media_type)
    bio = BytesIO(content)
    if kind is MediaType.PDF:
        return _extract_pdf(bio)
    return _extract_docx(bio)


async def extract_text_async(content: bytes, media_type: MediaType) -> str:
    """extract_text on a worker thread so the event loop stays free."""
    return await asyncio.to_thread(extract_text, content, media_type)
