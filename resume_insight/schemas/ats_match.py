"""ATS match details for one resume against a job description."""

from typing import List

from pydantic import BaseModel, Field


class AtsMatchResult(BaseModel):
    """Keyword-level match summary returned by the ATS check."""

    score: int = Field(default=0, description="Match score 0-100")
    matched_keywords: List[str] = Field(default_factory=list, description="Job keywords found in the resume")
    missing_keywords: List[str] = Field(default_factory=list, description="Important job keywords missing from the resume")
    summary: str = Field(default="", description="One-sentence summary of match quality")
