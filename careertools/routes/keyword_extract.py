"""
keyword_extract.py — ATS keyword finder.

Routes:
  OPTIONS /api/keyword-extract  — CORS preflight
  POST    /api/keyword-extract  — pull action verbs, technical skills and soft
                                  skills out of a job description

The job description is cleaned, length-checked (10..4000 chars after
cleaning) and sent to Gemini, which is asked for a JSON object with three
arrays. Gemini is usually right but not always well-formed: when the reply
cannot be parsed a fixed, generic keyword set is returned instead of an
error, and any missing array is filled with [].
"""

import logging

from fastapi import APIRouter, Depends, Request

from careertools.ai.gemini_client import GeminiModel, gemini_client
from careertools.ai.parsing import parse_json_object
from careertools.core.errors import ValidationFailed
from careertools.core.rate_limit import RateLimitResult
from careertools.models.tools import KeywordExtractRequest, KeywordSet
from careertools.routes.guard import preflight, tool_guard, tool_response
from careertools.services.text_cleaning import clean_text

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"])

MIN_CHARS = 10
MAX_CHARS = 4000

FALLBACK_KEYWORDS = KeywordSet(
    action_verbs=["Developed", "Managed", "Implemented", "Analyzed", "Designed"],
    technical_skills=["JavaScript", "React", "Node.js", "SQL", "Git"],
    soft_skills=["Communication", "Leadership", "Problem Solving", "Teamwork", "Adaptability"],
)

_KEYWORD_PROMPT = """\
Analyze this job description and extract keywords in these specific categories.
Return ONLY a valid JSON object with these exact keys:

{{
  "actionVerbs": [],
  "technicalSkills": [],
  "softSkills": []
}}

Job Description:
"{job_description}"

Instructions:
- actionVerbs: action words that describe responsibilities (e.g. "develop", "manage", "implement", "analyze", "design")
- technicalSkills: specific tools, technologies, programming languages, frameworks, software (e.g. "JavaScript", "React", "SQL", "AWS", "Docker")
- softSkills: interpersonal and professional skills (e.g. "communication", "leadership", "problem-solving", "teamwork")
- Return 5-15 keywords per category
- Keep keywords concise and relevant
- Return ONLY the JSON object, no additional text"""


def _to_keywords(raw: str) -> KeywordSet:
    data = parse_json_object(raw)
    if data is None:
        logger.warning("Keyword reply was not valid JSON; using fallback keywords")
        return FALLBACK_KEYWORDS

    def _strings(key: str) -> list[str]:
        value = data.get(key)
        if not isinstance(value, list):
            return []
        return [str(item) for item in value]

    return KeywordSet(
        action_verbs=_strings("actionVerbs"),
        technical_skills=_strings("technicalSkills"),
        soft_skills=_strings("softSkills"),
    )


@router.options("/api/keyword-extract", include_in_schema=False)
async def keyword_extract_preflight(request: Request):
    return preflight(request)


@router.post("/api/keyword-extract")
async def keyword_extract(
    request: Request,
    payload: KeywordExtractRequest,
    limit: RateLimitResult = Depends(tool_guard("keyword-extract", "Keyword extraction")),
):
    """Extract ATS keywords from a job description."""
    job_description = clean_text(payload.job_description)
    if len(job_description) < MIN_CHARS:
        raise ValidationFailed(f"Job description must be at least {MIN_CHARS} characters long")
    if len(job_description) > MAX_CHARS:
        raise ValidationFailed(f"Job description must be less than {MAX_CHARS} characters")

    raw = await gemini_client.generate(
        _KEYWORD_PROMPT.format(job_description=job_description),
        model=GeminiModel.FLASH,
        response_key="keyword_extract",
    )
    keywords = _to_keywords(raw)
    logger.info(
        "Keywords extracted: %d verbs, %d technical, %d soft",
        len(keywords.action_verbs),
        len(keywords.technical_skills),
        len(keywords.soft_skills),
    )

    return tool_response(
        request,
        {
            "keywords": keywords.model_dump(by_alias=True),
            "inputLength": len(job_description),
        },
        limit,
    )
