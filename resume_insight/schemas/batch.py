"""Batch run state, per-document outcomes and the aggregate result."""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field

from resume_insight.schemas.resume_record import ExtractionRecord


class ProcessingState(str, Enum):
    """Orchestrator state machine."""

    IDLE = "IDLE"
    PARSING_INPUT = "PARSING_INPUT"
    PARSING_FILE = "PARSING_FILE"
    CALLING_SERVICE = "CALLING_SERVICE"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


class DocumentStage(str, Enum):
    """Stage of the document currently in flight."""

    EXTRACTING_TEXT = "EXTRACTING_TEXT"
    QUERYING_SERVICE = "QUERYING_SERVICE"


class ProcessProgress(BaseModel):
    """Transient progress of a run; not persisted."""

    current_document: Optional[str] = Field(default=None, description="Document in flight")
    stage: Optional[DocumentStage] = Field(default=None, description="Stage of that document")
    processed: int = Field(default=0, description="Documents with a terminal outcome so far")
    total: int = Field(default=0, description="Documents in the batch")


class RunSnapshot(BaseModel):
    """What progress observers receive on every state transition."""

    state: ProcessingState
    progress: Optional[ProcessProgress] = None
    error: Optional[str] = None


class ExtractionSuccess(BaseModel):
    document_name: str
    record: ExtractionRecord


class ExtractionFailure(BaseModel):
    document_name: str
    message: str


DocumentOutcome = Union[ExtractionSuccess, ExtractionFailure]


class BatchResult(BaseModel):
    """Terminal output of a batch run."""

    records: List[ExtractionRecord] = Field(default_factory=list, description="Successes, in processing order")
    failures: Dict[str, str] = Field(default_factory=dict, description="Document name -> error message")
    expansion_errors: Dict[str, str] = Field(
        default_factory=dict, description="Archive members that could not be decompressed (never attempted)"
    )

    @property
    def attempted(self) -> int:
        return len(self.records) + len(self.failures)

    @classmethod
    def from_outcomes(
        cls,
        outcomes: Iterable[DocumentOutcome],
        expansion_errors: Optional[Dict[str, str]] = None,
    ) -> "BatchResult":
        """Fold tagged outcomes into a result. Keeps one failure entry per attempted document."""
        records: List[ExtractionRecord] = []
        failures: Dict[str, str] = {}
        for outcome in outcomes:
            if isinstance(outcome, ExtractionSuccess):
                records.append(outcome.record)
                continue
            key = outcome.document_name
            n = 2
            while key in failures:
                key = f"{outcome.document_name} ({n})"
                n += 1
            failures[key] = outcome.message
        return cls(records=records, failures=failures, expansion_errors=dict(expansion_errors or {}))
