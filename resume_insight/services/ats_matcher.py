"""ATS check: score a resume against a job description with the extraction service."""

import re

from pydantic import ValidationError

from resume_insight.cv_pipeline.response_sanitizer import parse_response
from resume_insight.errors import UnparseableResponseError
from resume_insight.schemas.ats_match import AtsMatchResult
from resume_insight.services.extraction_service import ExtractionService
from resume_insight.services.text_cleaner import clean_resume_text
from resume_insight.utils.logger import get_logger

logger = get_logger(__name__)

ATS_SCORE_PROMPT = """You are an ATS scoring system. Given a resume and a job description, output ONLY a single number (0-100) representing how well the resume matches the job description for recruiter search and ranking.
Consider keyword match, skills, experience, and formatting. Do not output any explanation or text, just the score."""

ATS_DETAILS_PROMPT = """You are an ATS scoring system. Given a resume and a job description, output a valid JSON object with these keys:
- "score": number (0-100)
- "matched_keywords": array of strings (keywords from the job description found in the resume)
- "missing_keywords": array of strings (important keywords from the job description missing in the resume)
- "summary": string (one-sentence summary of match quality)
Do not output any explanation or text before or after the JSON."""

FALLBACK_SUMMARY = "Could not parse ATS match details."

_FIRST_INTEGER = re.compile(r"\d+")


def _match_content(resume_text: str, job_description: str) -> str:
    if not (resume_text or "").strip() or not (job_description or "").strip():
        raise ValueError("Both resume text and job description are required for ATS check.")
    return f"Resume:\n{clean_resume_text(resume_text)}\n\nJob Description:\n{job_description.strip()}"


def _clamp_score(value: int) -> int:
    return min(100, max(0, value))


async def score_match(service: ExtractionService, resume_text: str, job_description: str) -> int:
    """Return a 0-100 match score; 0 when the reply carries no number."""
    content = _match_content(resume_text, job_description)
    reply = await service.generate(ATS_SCORE_PROMPT, content, json_output=False)
    match = _FIRST_INTEGER.search((reply or "").strip())
    return _clamp_score(int(match.group(0))) if match else 0


async def match_details(service: ExtractionService, resume_text: str, job_description: str) -> AtsMatchResult:
    """
    Return score plus matched/missing keywords.
    An unusable reply yields the fallback result rather than an error.
    """
    content = _match_content(resume_text, job_description)
    reply = await service.generate(ATS_DETAILS_PROMPT, content)
    try:
        parsed = parse_response(reply)
        if not isinstance(parsed, dict):
            raise UnparseableResponseError("ATS reply is not a JSON object.")
        result = AtsMatchResult(**parsed)
    except (UnparseableResponseError, ValidationError, TypeError) as e:
        logger.warning("ATS match reply could not be used: %s", e)
        return AtsMatchResult(summary=FALLBACK_SUMMARY)
    return result.model_copy(update={"score": _clamp_score(result.score)})
