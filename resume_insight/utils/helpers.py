"""Helper utilities for file names and upload classification."""

from typing import Optional

from resume_insight.config import ACCEPTED_CONTENT_TYPES
from resume_insight.schemas.document import InputKind, MediaType, UploadedFile


def file_stem(filename: str) -> str:
    """File name without its last extension ('cv.final.pdf' -> 'cv.final')."""
    if not filename:
        return ""
    dot = filename.rfind(".")
    if dot <= 0:
        return filename
    return filename[:dot]


def media_type_for_filename(filename: str) -> Optional[MediaType]:
    """Classify a document by suffix (case-insensitive). None if unsupported."""
    name_lower = (filename or "").lower().strip()
    for media_type in MediaType:
        if name_lower.endswith(media_type.suffix):
            return media_type
    return None


def classify_upload(upload: UploadedFile) -> Optional[InputKind]:
    """
    Decide what an upload is: declared content type first, then file suffix.
    Returns None if neither identifies a supported input.
    """
    declared = (upload.content_type or "").split(";")[0].strip().lower()
    if declared in ACCEPTED_CONTENT_TYPES:
        return InputKind(ACCEPTED_CONTENT_TYPES[declared])
    name_lower = (upload.name or "").lower().strip()
    if name_lower.endswith(".zip"):
        return InputKind.ZIP
    media_type = media_type_for_filename(name_lower)
    if media_type is not None:
        return InputKind(media_type.value)
    return None
