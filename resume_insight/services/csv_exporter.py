"""Export extraction records to CSV: one row per work experience entry."""

import csv
import io
from typing import Iterable, List, Optional

from resume_insight.config import NOT_SPECIFIED
from resume_insight.schemas.resume_record import ExtractionRecord
from resume_insight.utils.helpers import file_stem

CSV_HEADERS = [
    "Source File Name",
    "Full Name",
    "Email",
    "Phone Number",
    "Company Name",
    "Customer Name",
    "Role",
    "Duration",
    "Skills/Technologies",
    "Industry/Domain",
    "Location",
]


def _cell(value: Optional[str]) -> str:
    return value if value else NOT_SPECIFIED


def _record_rows(record: ExtractionRecord) -> List[List[str]]:
    person = [_cell(record.source_name), _cell(record.full_name), _cell(record.email), _cell(record.phone_number)]
    if not record.work_experience:
        return [person + [NOT_SPECIFIED] * 7]
    rows = []
    for entry in record.work_experience:
        rows.append(
            person
            + [
                _cell(entry.company_name),
                _cell(entry.customer_name),
                _cell(entry.role),
                _cell(entry.duration),
                "; ".join(entry.skills_technologies) if entry.skills_technologies else NOT_SPECIFIED,
                _cell(entry.industry_domain),
                _cell(entry.location),
            ]
        )
    return rows


def records_to_csv(records: Iterable[ExtractionRecord]) -> bytes:
    """Export records to UTF-8 CSV bytes with every field quoted."""
    out = io.StringIO()
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in records:
        writer.writerows(_record_rows(record))
    return out.getvalue().encode("utf-8")


def export_filename(upload_name: str) -> str:
    """Download name for an upload's results, e.g. 'resumes.zip' -> 'resumes.csv'."""
    return f"{file_stem(upload_name) or 'resumes'}.csv"
