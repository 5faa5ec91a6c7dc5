"""Resume Insight: batch extraction of structured resume data with an LLM."""

from resume_insight.cv_pipeline import BatchOrchestrator, process_upload
from resume_insight.schemas import BatchResult, ExtractionRecord, UploadedFile
from resume_insight.services import build_extraction_service, records_to_csv

__version__ = "0.1.0"

__all__ = [
    "BatchOrchestrator",
    "BatchResult",
    "ExtractionRecord",
    "UploadedFile",
    "build_extraction_service",
    "process_upload",
    "records_to_csv",
]
