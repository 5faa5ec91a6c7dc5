"""Input documents: uploaded files and the per-document units the pipeline consumes."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class MediaType(str, Enum):
    """Document formats with a text extractor."""

    PDF = "pdf"
    DOCX = "docx"

    @property
    def suffix(self) -> str:
        return f".{self.value}"

    @property
    def mime_type(self) -> str:
        if self is MediaType.PDF:
            return "application/pdf"
        return "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class InputKind(str, Enum):
    """What a user-submitted upload turned out to be."""

    PDF = "pdf"
    DOCX = "docx"
    ZIP = "zip"


class UploadedFile(BaseModel):
    """One user-submitted input: a single resume or a ZIP of resumes."""

    name: str = Field(..., description="Original file name")
    content: bytes = Field(..., description="Raw file bytes")
    content_type: Optional[str] = Field(default=None, description="Declared MIME type, if any")


class Document(BaseModel):
    """One resume to process. Never mutated once the batch is assembled."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="File name (archive members keep their path)")
    content: Union[bytes, str] = Field(
        ..., description="Raw bytes, or already-extracted text which skips text extraction"
    )
    media_type: MediaType = Field(..., description="Selects the text extractor")
