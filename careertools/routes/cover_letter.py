"""
cover_letter.py — Cover letter generator.

Routes:
  OPTIONS /api/cover-letter-generate  — CORS preflight
  POST    /api/cover-letter-generate  — write a 250-400 word cover letter from
                                        a resume and a job description

Limits after cleaning: resume 50..15,000 chars and at most 2,500 words, job
description 10..4,000 chars. "@+#" survive cleaning so emails, C++ and C#
stay intact. Markdown the model adds anyway (code fences, bold) is stripped
from the letter.
"""

import logging

from fastapi import APIRouter, Depends, Request

from careertools.ai.gemini_client import GeminiModel, gemini_client
from careertools.core.errors import ValidationFailed
from careertools.core.rate_limit import RateLimitResult
from careertools.models.tools import CoverLetterRequest
from careertools.routes.guard import preflight, tool_guard, tool_response
from careertools.services.text_cleaning import clean_text, word_count

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"])

EXTRA_ALLOWED = "@+#"
RESUME_MIN_CHARS = 50
RESUME_MAX_CHARS = 15_000
RESUME_MAX_WORDS = 2500
JOB_MIN_CHARS = 10
JOB_MAX_CHARS = 4000

_GENERATION_CONFIG = {
    "temperature": 0.7,
    "top_k": 40,
    "top_p": 0.95,
    "max_output_tokens": 1024,
}

_COVER_LETTER_PROMPT = """\
You are an expert career advisor and professional writer. Based on the candidate's
resume and the job description provided, write a powerful, impactful and concise
cover letter.

REQUIREMENTS:
- Length: 250-400 words (strict requirement)
- Structure: 3-4 paragraphs with clear flow
- Tone: professional, confident and engaging
- Format: no date, no addresses, no "Dear Hiring Manager"; start directly with content
- Content: relevant experience, skills and achievements that match the job requirements
- Focus: a clear value proposition and enthusiasm for this specific role

RESUME:
{resume}

JOB DESCRIPTION:
{job_description}

Make it specific to this role and show quantifiable results where possible.
Return ONLY the cover letter text, no additional commentary or formatting markers."""


def _strip_markdown(text: str) -> str:
    return text.replace("```", "").replace("**", "").strip()


@router.options("/api/cover-letter-generate", include_in_schema=False)
async def cover_letter_preflight(request: Request):
    return preflight(request)


@router.post("/api/cover-letter-generate")
async def cover_letter_generate(
    request: Request,
    payload: CoverLetterRequest,
    limit: RateLimitResult = Depends(tool_guard("cover-letter-generate", "Cover letter generation")),
):
    resume = clean_text(payload.resume, EXTRA_ALLOWED)
    job_description = clean_text(payload.job_description, EXTRA_ALLOWED)

    if len(resume) < RESUME_MIN_CHARS:
        raise ValidationFailed(f"Resume must be at least {RESUME_MIN_CHARS} characters long")
    if len(job_description) < JOB_MIN_CHARS:
        raise ValidationFailed(f"Job description must be at least {JOB_MIN_CHARS} characters long")
    words = word_count(resume)
    if words > RESUME_MAX_WORDS:
        raise ValidationFailed(
            f"Resume exceeds {RESUME_MAX_WORDS} word limit (current: {words} words)"
        )
    if len(resume) > RESUME_MAX_CHARS:
        raise ValidationFailed("Resume must be less than 15,000 characters")
    if len(job_description) > JOB_MAX_CHARS:
        raise ValidationFailed("Job description must be less than 4,000 characters")

    raw = await gemini_client.generate(
        _COVER_LETTER_PROMPT.format(resume=resume, job_description=job_description),
        model=GeminiModel.FLASH,
        response_key="cover_letter",
        generation_config=_GENERATION_CONFIG,
    )
    letter = _strip_markdown(raw)
    letter_words = word_count(letter)
    logger.info("Cover letter generated (%d words)", letter_words)

    return tool_response(request, {"coverLetter": letter, "wordCount": letter_words}, limit)
