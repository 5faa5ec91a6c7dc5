"""Utility exports."""

from .helpers import classify_upload, file_stem, media_type_for_filename
from .logger import get_logger

__all__ = [
    "get_logger",
    "classify_upload",
    "file_stem",
    "media_type_for_filename",
]
