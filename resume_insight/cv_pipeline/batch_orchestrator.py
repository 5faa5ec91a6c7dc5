"""
Batch orchestration: run single-document extraction over every document of an
upload, strictly one at a time, and fold the outcomes into a BatchResult.

State machine per run::

    IDLE -> PARSING_INPUT -> (PARSING_FILE <-> CALLING_SERVICE)* -> SUCCESS | ERROR

Document failures never end the run; they become ``failures`` entries. Only
run-scoped problems (nothing to process, no service client, or an error that
escaped the per-document boundary) end in ERROR and raise BatchRunError.
"""

import asyncio
from typing import Callable, Dict, List, Optional, Tuple

from resume_insight.cv_pipeline.archive import expand_archive
from resume_insight.cv_pipeline.cv_extractor import attempt_document
from resume_insight.errors import BatchRunError, UnsupportedInputError
from resume_insight.schemas.batch import (
    BatchResult,
    DocumentOutcome,
    DocumentStage,
    ProcessingState,
    ProcessProgress,
    RunSnapshot,
)
from resume_insight.schemas.document import Document, InputKind, MediaType, UploadedFile
from resume_insight.services.extraction_service import ExtractionService, build_extraction_service
from resume_insight.utils.helpers import classify_upload
from resume_insight.utils.logger import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[RunSnapshot], None]


class BatchOrchestrator:
    """Drives one upload through the pipeline and reports progress to an observer."""

    def __init__(
        self,
        service: Optional[ExtractionService] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self._service = service
        self._on_progress = on_progress
        self.state = ProcessingState.IDLE
        self.progress: Optional[ProcessProgress] = None
        self.error: Optional[str] = None

    def _notify(self) -> None:
        if self._on_progress is None:
            return
        progress = self.progress.model_copy() if self.progress is not None else None
        self._on_progress(RunSnapshot(state=self.state, progress=progress, error=self.error))

    def _transition(self, state: ProcessingState) -> None:
        self.state = state
        self._notify()

    def _on_stage(self, stage: DocumentStage) -> None:
        if self.progress is not None:
            self.progress = self.progress.model_copy(update={"stage": stage})
        if stage is DocumentStage.QUERYING_SERVICE:
            self._transition(ProcessingState.CALLING_SERVICE)

    async def _assemble_documents(self, upload: UploadedFile) -> Tuple[List[Document], Dict[str, str]]:
        kind = classify_upload(upload)
        if kind is None:
            raise UnsupportedInputError(upload.name, upload.content_type)
        if kind is InputKind.ZIP:
            expansion = await expand_archive(upload.content)
            return expansion.documents, expansion.errors
        doc = Document(name=upload.name, content=upload.content, media_type=MediaType(kind.value))
        return [doc], {}

    async def run(self, upload: UploadedFile) -> BatchResult:
        """
        Process an upload to completion.

        Returns the BatchResult (possibly with failures). Raises BatchRunError
        after moving to ERROR when no document could be attempted.
        """
        self.error = None
        self.progress = ProcessProgress(current_document=upload.name)
        try:
            self._transition(ProcessingState.PARSING_INPUT)
            service = self._service if self._service is not None else build_extraction_service()
            documents, expansion_errors = await self._assemble_documents(upload)
            total = len(documents)
            outcomes: List[DocumentOutcome] = []
            for index, doc in enumerate(documents):
                self.progress = ProcessProgress(
                    current_document=doc.name,
                    stage=DocumentStage.EXTRACTING_TEXT,
                    processed=index,
                    total=total,
                )
                self._transition(ProcessingState.PARSING_FILE)
                outcomes.append(await attempt_document(doc, service, on_stage=self._on_stage))
            if self.progress is not None:
                self.progress = self.progress.model_copy(update={"stage": None, "processed": total})
                self._notify()
            result = BatchResult.from_outcomes(outcomes, expansion_errors)
        except BatchRunError as e:
            logger.error("Batch for %s aborted: %s", upload.name, e.message)
            self._abort(e.message)
            raise
        except Exception as e:
            logger.exception("Processing error for %s: %s", upload.name, e)
            message = f"An unknown error occurred during processing: {e}"
            self._abort(message)
            raise BatchRunError(message) from e

        self.progress = None
        self._transition(ProcessingState.SUCCESS)
        logger.info(
            "Batch for %s finished: documents=%s records=%s failures=%s",
            upload.name,
            result.attempted,
            len(result.records),
            len(result.failures),
        )
        return result

    def _abort(self, message: str) -> None:
        self.error = message
        self.progress = None
        self._transition(ProcessingState.ERROR)

    def run_sync(self, upload: UploadedFile) -> BatchResult:
        """
        Run the batch from synchronous code on a fresh event loop.
        """
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            return loop.run_until_complete(self.run(upload))
        finally:
            loop.close()


async def process_upload(
    upload: UploadedFile,
    service: Optional[ExtractionService] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> BatchResult:
    """Run one upload through a fresh BatchOrchestrator."""
    return await BatchOrchestrator(service=service, on_progress=on_progress).run(upload)
