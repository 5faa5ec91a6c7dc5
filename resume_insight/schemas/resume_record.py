"""Normalized resume record produced for each successfully processed document."""

from typing import List, Optional

from pydantic import BaseModel, Field

from resume_insight.config import NOT_SPECIFIED


class ExperienceEntry(BaseModel):
    """One employment entry within a resume."""

    company_name: str = Field(default=NOT_SPECIFIED, description="Employer name")
    customer_name: str = Field(default=NOT_SPECIFIED, description="Client/customer served, if any")
    role: str = Field(default=NOT_SPECIFIED, description="Job title")
    duration: str = Field(default=NOT_SPECIFIED, description="Period worked, e.g. 'Jan 2020 - Dec 2022'")
    skills_technologies: List[str] = Field(default_factory=list, description="Skills used in this role, in order")
    industry_domain: str = Field(default=NOT_SPECIFIED, description="Industry sector")
    location: str = Field(default=NOT_SPECIFIED, description="Geographical region or 'Remote'")


class ExtractionRecord(BaseModel):
    """Canonical extraction result for one document. None marks an absent value."""

    source_name: str = Field(default="", description="Name of the originating document")
    full_name: Optional[str] = Field(default=None, description="Candidate's full name")
    email: Optional[str] = Field(default=None, description="Primary email address")
    phone_number: Optional[str] = Field(default=None, description="Primary phone number")
    work_experience: List[ExperienceEntry] = Field(
        default_factory=list, description="Entries in the order the model emitted them"
    )
    ats_score: int = Field(default=0, description="Estimated ATS score, nominally 0-100")
