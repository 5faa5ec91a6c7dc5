"""Service exports."""

from .ats_matcher import match_details, score_match
from .csv_exporter import export_filename, records_to_csv
from .extraction_service import (
    ExtractionService,
    OpenAIExtractionService,
    build_extraction_service,
)
from .text_cleaner import clean_resume_text

__all__ = [
    "ExtractionService",
    "OpenAIExtractionService",
    "build_extraction_service",
    "clean_resume_text",
    "export_filename",
    "match_details",
    "records_to_csv",
    "score_match",
]
