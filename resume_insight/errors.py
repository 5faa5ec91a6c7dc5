"""
Exceptions raised by the Resume Insight pipeline.

Two families matter to the batch orchestrator:

- ``DocumentError``: attributable to one document. Caught at the per-document
  boundary and reported in ``BatchResult.failures``; the batch continues.
- ``BatchRunError``: nothing can be attempted (or the isolation boundary was
  breached). The run ends in the ERROR state and the error reaches the caller.
"""

from typing import Any, Optional


class ResumeInsightError(Exception):
    """Base exception for all Resume Insight errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Document-scoped errors
# =============================================================================


class DocumentError(ResumeInsightError):
    """Failure of a single document; recoverable at the batch level."""

    pass


class UnsupportedMediaTypeError(DocumentError):
    """Media type has no text extractor."""

    def __init__(self, media_type: Any) -> None:
        message = f"Unsupported file type for content parsing: {media_type}"
        super().__init__(message, {"media_type": str(media_type)})


class TextExtractionError(DocumentError):
    """PDF/DOCX parser failed on the document bytes."""

    pass


class EmptyTextError(DocumentError):
    """Text extraction succeeded but produced nothing usable."""

    def __init__(self, document_name: str) -> None:
        super().__init__(
            "Could not extract text or file is empty.",
            {"document": document_name},
        )


class ServiceError(DocumentError):
    """The extraction service call failed."""

    pass


class ServiceBlockedError(ServiceError):
    """Service refused the request (non-2xx status, safety filter or refusal)."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"AI processing failed: {reason}. This may be due to safety filters on the input or output.",
            {"reason": reason},
        )
        self.reason = reason


class EmptyResponseError(ServiceError):
    """Service answered without any content."""

    def __init__(self) -> None:
        super().__init__("AI response was empty or malformed (no content parts).")


class MalformedResponseShapeError(ServiceError):
    """Service answered, but the content is not text."""

    def __init__(self, detail: str = "") -> None:
        message = "AI response text is not in the expected string format."
        super().__init__(message, {"detail": detail} if detail else None)


class UnparseableResponseError(DocumentError):
    """Response could not be repaired into valid JSON."""

    def __init__(self, message: str = "", details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(
            message or "Received an invalid JSON response from the AI. The AI's output could not be parsed.",
            details,
        )


class InvalidShapeError(DocumentError):
    """Parsed response is valid JSON but not an object."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            "AI response was parsed, but it is not a valid JSON object.",
            {"type": type(value).__name__},
        )


# =============================================================================
# Run-scoped errors
# =============================================================================


class BatchRunError(ResumeInsightError):
    """Failure that aborts the whole batch."""

    pass


class EmptyArchiveError(BatchRunError):
    """Archive expanded to zero supported documents."""

    def __init__(self) -> None:
        super().__init__("The ZIP file is empty or contains no supported resume files (PDF, DOCX).")


class InvalidArchiveError(BatchRunError):
    """Archive blob is not a readable ZIP file."""

    pass


class UnsupportedInputError(BatchRunError):
    """Upload is neither a supported document nor an archive."""

    def __init__(self, name: str, content_type: Optional[str]) -> None:
        super().__init__(
            f"Unsupported file type for '{name}'. Please upload: .pdf, .docx, .zip",
            {"name": name, "content_type": content_type},
        )


class ServiceNotConfiguredError(BatchRunError):
    """No credential is available to build the extraction service client."""

    def __init__(self) -> None:
        super().__init__(
            "OPENAI_API_KEY is not set; the extraction service client cannot be initialized. "
            "Add it to your .env file."
        )
