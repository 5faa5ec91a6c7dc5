"""Schema exports."""

from .ats_match import AtsMatchResult
from .batch import (
    BatchResult,
    DocumentOutcome,
    DocumentStage,
    ExtractionFailure,
    ExtractionSuccess,
    ProcessingState,
    ProcessProgress,
    RunSnapshot,
)
from .document import Document, InputKind, MediaType, UploadedFile
from .resume_record import ExperienceEntry, ExtractionRecord

__all__ = [
    "AtsMatchResult",
    "BatchResult",
    "Document",
    "DocumentOutcome",
    "DocumentStage",
    "ExperienceEntry",
    "ExtractionFailure",
    "ExtractionRecord",
    "ExtractionSuccess",
    "InputKind",
    "MediaType",
    "ProcessingState",
    "ProcessProgress",
    "RunSnapshot",
    "UploadedFile",
]
