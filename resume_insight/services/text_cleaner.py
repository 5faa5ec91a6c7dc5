"""Clean and normalize extracted resume text for LLM consumption."""

import re
import unicodedata

from resume_insight.config import MAX_DOCUMENT_CHARS


def normalize_unicode(text: str) -> str:
    """Normalize unicode (NFC)."""
    if not text:
        return ""
    return unicodedata.normalize("NFC", text)


def clean_resume_text(text: str, max_chars: int = MAX_DOCUMENT_CHARS) -> str:
    """
    Collapse runs of spaces/tabs and of blank lines, normalize unicode, and
    truncate to max_chars with a marker so the model knows text is missing.
    """
    if not text or not text.strip():
        return ""
    t = normalize_unicode(text)
    t = t.replace("\x00", "")
    t = re.sub(r"[ \t]+", " ", t)
    t = re.sub(r"\n\s*\n\s*\n", "\n\n", t)
    t = t.strip()
    if len(t) > max_chars:
        t = t[:max_chars] + "\n\n[Content truncated.]"
    return t
