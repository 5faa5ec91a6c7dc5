"""Map whatever the model returned onto the canonical ExtractionRecord shape."""

import json
import math
from typing import Any, List, Optional

from resume_insight.config import NOT_SPECIFIED
from resume_insight.errors import InvalidShapeError
from resume_insight.schemas.resume_record import ExperienceEntry, ExtractionRecord
from resume_insight.utils.logger import get_logger

logger = get_logger(__name__)

# Response keys as named in the extraction prompt
FULL_NAME = "Full Name"
EMAIL = "Email"
PHONE_NUMBER = "Phone Number"
ATS_SCORE = "ATS Score"
WORK_EXPERIENCE = "Work Experience"

EXPERIENCE_TEXT_FIELDS = {
    "company_name": "Company Name",
    "customer_name": "Customer Name",
    "role": "Role",
    "duration": "Duration",
    "industry_domain": "Industry/Domain",
    "location": "Location",
}
SKILLS = "Skills/Technologies"


def _optional_text(value: Any) -> Optional[str]:
    """Missing and null both mean absent; other non-strings are stringified."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _text_or_default(value: Any) -> str:
    if not value:
        return NOT_SPECIFIED
    return value if isinstance(value, str) else str(value)


def _ats_score(value: Any) -> int:
    # bool is an int subclass but JSON true/false is not a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float):
        # half up, so 86.5 scores 87
        return math.floor(value + 0.5) if math.isfinite(value) else 0
    return value


def _skills(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    skills = []
    for item in value:
        if isinstance(item, str):
            text = item
        elif item is None or isinstance(item, (bool, int, float)):
            # JSON spelling: null, true, 3
            text = json.dumps(item)
        else:
            text = str(item)
        if text.strip():
            skills.append(text)
    return skills


def normalize_experience(entry: dict) -> ExperienceEntry:
    """Build one ExperienceEntry, defaulting every missing text field to NOT_SPECIFIED."""
    fields = {name: _text_or_default(entry.get(key)) for name, key in EXPERIENCE_TEXT_FIELDS.items()}
    return ExperienceEntry(skills_technologies=_skills(entry.get(SKILLS)), **fields)


def _work_experience(value: Any) -> List[ExperienceEntry]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("'%s' field was present but not an array: %.200r", WORK_EXPERIENCE, value)
        return []
    entries = []
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            logger.warning("Work experience entry at index %s is not a valid object: %.200r", index, item)
            continue
        entries.append(normalize_experience(item))
    return entries


def normalize_record(parsed: Any, source_name: str = "") -> ExtractionRecord:
    """
    Translate a decoded model response into an ExtractionRecord.

    Total for any JSON-decodable value: the only exception raised is
    InvalidShapeError, when the top level is not an object.
    """
    if not isinstance(parsed, dict):
        logger.error("Parsed response is not a valid object: %.200r", parsed)
        raise InvalidShapeError(parsed)
    return ExtractionRecord(
        source_name=source_name,
        full_name=_optional_text(parsed.get(FULL_NAME)),
        email=_optional_text(parsed.get(EMAIL)),
        phone_number=_optional_text(parsed.get(PHONE_NUMBER)),
        work_experience=_work_experience(parsed.get(WORK_EXPERIENCE)),
        ats_score=_ats_score(parsed.get(ATS_SCORE)),
    )
