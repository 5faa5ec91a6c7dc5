"""LLM-based extraction of one structured resume record per document."""

from typing import Callable, Optional

from resume_insight.cv_pipeline.record_normalizer import normalize_record
from resume_insight.cv_pipeline.response_sanitizer import parse_response
from resume_insight.cv_pipeline.text_extractor import extract_text_async
from resume_insight.errors import DocumentError, EmptyTextError
from resume_insight.schemas.batch import (
    DocumentOutcome,
    DocumentStage,
    ExtractionFailure,
    ExtractionSuccess,
)
from resume_insight.schemas.document import Document
from resume_insight.schemas.resume_record import ExtractionRecord
from resume_insight.services.extraction_service import ExtractionService
from resume_insight.services.text_cleaner import clean_resume_text
from resume_insight.utils.logger import get_logger

logger = get_logger(__name__)

StageCallback = Callable[[DocumentStage], None]

RESUME_EXTRACTION_PROMPT = """You are an expert resume data extraction system. Your sole output MUST be a single, valid JSON object.
Extract the following information from the provided resume text.

The JSON object must have these top-level keys:
1.  "Full Name": The full name of the person. If not found, use JSON null (not the string "null").
2.  "Email": The primary email address. If not found, use JSON null.
3.  "Phone Number": The primary phone number. If not found, use JSON null.
4.  "Work Experience": An array of objects. Each object represents a distinct work experience.
5.  "ATS Score": (number, 0-100) A score estimating how well this resume would perform in a typical Applicant Tracking System (ATS) for recruiter search and ranking. Consider keyword match, clarity, formatting, and completeness. If not possible to score, use 0.

For each object in the "Work Experience" array, provide these keys:
    a.  "Company Name": (string) The name of the company. If not found, use the string "N/A".
    b.  "Customer Name": (string) The client/customer name. If internal or not mentioned, use "N/A".
    c.  "Role": (string) The job title/role. If not found, use "N/A".
    d.  "Duration": (string) The period worked (e.g., 'Jan 2020 - Dec 2022'). If not found, use "N/A".
    e.  "Skills/Technologies": (array of strings) Key skills/technologies for this role. If none found, use an empty array [].
    f.  "Industry/Domain": (string) Industry sector. If not found, use "N/A".
    g.  "Location": (string) Geographical region (e.g., "North America", "Remote"). If not found, use "N/A".

JSON structure rules:
- Output only the JSON object: no explanatory text and no markdown code fences before or after it.
- All keys and string values must be enclosed in double quotes.
- If a work experience entry is garbled or cannot be reliably extracted, omit that entry; the "Work Experience" array itself must stay valid ([] if all entries are omitted).
- No unquoted words or characters may appear inside arrays or objects.

If the input text does not appear to be a resume, or no information can be extracted, return:
{"Full Name": null, "Email": null, "Phone Number": null, "ATS Score": 0, "Work Experience": []}"""


def build_resume_prompt(resume_text: str) -> str:
    """User message carrying the document text."""
    return f"Resume Text:\n---\n{resume_text}\n---\nEnd of Resume Text. Output JSON object:"


async def extract_one(
    doc: Document,
    service: ExtractionService,
    on_stage: Optional[StageCallback] = None,
) -> ExtractionRecord:
    """
    Text extraction -> service call -> sanitize -> normalize for one document.

    Documents carrying str content are treated as already extracted. Raises a
    DocumentError subclass on failure; EmptyTextError when the text is blank.
    on_stage(QUERYING_SERVICE) fires only after text extraction succeeded.
    """
    if isinstance(doc.content, str):
        text = doc.content
    else:
        text = await extract_text_async(doc.content, doc.media_type)
    if not text.strip():
        logger.warning("Empty text extracted from %s", doc.name)
        raise EmptyTextError(doc.name)

    if on_stage is not None:
        on_stage(DocumentStage.QUERYING_SERVICE)
    reply = await service.generate(
        RESUME_EXTRACTION_PROMPT,
        build_resume_prompt(clean_resume_text(text)),
    )
    record = normalize_record(parse_response(reply), source_name=doc.name)
    logger.info(
        "Extracted %s: experience_entries=%s ats_score=%s",
        doc.name,
        len(record.work_experience),
        record.ats_score,
    )
    return record


async def attempt_document(
    doc: Document,
    service: ExtractionService,
    on_stage: Optional[StageCallback] = None,
) -> DocumentOutcome:
    """Per-document isolation boundary: never raises, returns a tagged outcome."""
    try:
        record = await extract_one(doc, service, on_stage)
    except DocumentError as e:
        logger.warning("Error processing %s: %s", doc.name, e)
        return ExtractionFailure(document_name=doc.name, message=e.message)
    except Exception as e:
        logger.exception("Unexpected error processing %s: %s", doc.name, e)
        return ExtractionFailure(document_name=doc.name, message=f"Failed to extract data: {e}")
    return ExtractionSuccess(document_name=doc.name, record=record)
