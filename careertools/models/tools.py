"""
tools.py — Pydantic models for the career-tool endpoints.

The marketing site's forms post camelCase JSON, so every model uses a
camelCase alias generator. Length limits are not declared here: they apply
to the cleaned text and are checked by each route after cleaning.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Keyword extraction ────────────────────────────────────────────────────────

class KeywordExtractRequest(CamelModel):
    job_description: str


class KeywordSet(CamelModel):
    action_verbs:     list[str] = Field(default_factory=list)
    technical_skills: list[str] = Field(default_factory=list)
    soft_skills:      list[str] = Field(default_factory=list)


# ── Cover letter ──────────────────────────────────────────────────────────────

class CoverLetterRequest(CamelModel):
    resume: str
    job_description: str


# ── Resume gap analysis ───────────────────────────────────────────────────────

class ResumeGapRequest(CamelModel):
    resume: str
    target_role: str


# ── Skill gap analyzer ────────────────────────────────────────────────────────

class SkillGapRequest(CamelModel):
    """Profile submitted by the skill gap analyzer form."""

    current_role:     str = Field(..., min_length=1)
    target_role:      str = Field(..., min_length=1)
    industry:         str = Field(..., min_length=1)
    country:          str = Field(..., min_length=1)
    years_experience: Optional[Union[int, str]] = None  # form sends "3-5" style ranges too
    current_skills:   list[str] = Field(default_factory=list)
    timeline:         Optional[str] = None
