"""Resume pipeline: text extraction (PDF/DOCX/ZIP), LLM extraction, response repair, batching."""

from .archive import ArchiveExpansion, expand_archive
from .batch_orchestrator import BatchOrchestrator, process_upload
from .cv_extractor import attempt_document, extract_one
from .record_normalizer import normalize_record
from .response_sanitizer import parse_response, sanitize_response
from .text_extractor import extract_text, extract_text_async

__all__ = [
    "ArchiveExpansion",
    "BatchOrchestrator",
    "attempt_document",
    "expand_archive",
    "extract_one",
    "extract_text",
    "extract_text_async",
    "normalize_record",
    "parse_response",
    "process_upload",
    "sanitize_response",
]
