"""
resume_gap.py — Resume gap analysis.

Routes:
  OPTIONS /api/resume-gap-analysis  — CORS preflight
  POST    /api/resume-gap-analysis  — score a resume against a target role and
                                      list missing skills, certifications,
                                      experience gaps and recommendations

Unlike the keyword finder there is no fallback: a reply that is not JSON, or
that lacks overallScore / summary / missingSkills / recommendations, is an
API_ERROR. A made-up analysis would be worse than none.
"""

import logging

from fastapi import APIRouter, Depends, Request

from careertools.ai.gemini_client import GeminiModel, gemini_client
from careertools.ai.parsing import parse_json_object
from careertools.core.errors import UpstreamAPIError, ValidationFailed
from careertools.core.rate_limit import RateLimitResult
from careertools.models.tools import ResumeGapRequest
from careertools.routes.guard import preflight, tool_guard, tool_response
from careertools.services.text_cleaning import clean_text, word_count

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"])

EXTRA_ALLOWED = "@+#/&"
RESUME_MIN_CHARS = 100
RESUME_MAX_CHARS = 18_000
RESUME_MAX_WORDS = 3000
ROLE_MIN_CHARS = 5
ROLE_MAX_CHARS = 500

_GENERATION_CONFIG = {
    "temperature": 0.4,
    "top_k": 40,
    "top_p": 0.95,
    "max_output_tokens": 2048,
}

_RESUME_GAP_PROMPT = """\
You are an expert career counselor and resume analyst. Analyze the candidate's
resume against their target role and provide a comprehensive gap analysis.

TARGET ROLE:
{target_role}

CURRENT RESUME:
{resume}

Respond with valid JSON and nothing else:
{{
  "overallScore": <number 0-100>,
  "summary": "<2-3 sentence overview of readiness>",
  "missingSkills": [
    {{"skill": "<skill name>", "importance": "critical|high|medium", "reason": "<why it matters for the role>"}}
  ],
  "missingCertifications": [
    {{"certification": "<name>", "importance": "critical|high|medium", "provider": "<issuer>", "reason": "<why it matters>"}}
  ],
  "experienceGaps": [
    {{"gap": "<experience type>", "importance": "critical|high|medium", "suggestion": "<how to gain it>"}}
  ],
  "strengths": ["<existing strength>"],
  "recommendations": [
    {{"priority": "immediate|short-term|long-term", "action": "<specific action>", "timeframe": "<estimate>", "impact": "high|medium|low"}}
  ]
}}

REQUIREMENTS:
- Identify 3-8 missing skills, most important first
- Identify 1-5 relevant certifications if applicable
- Identify 2-5 experience gaps and 3-5 existing strengths
- Provide 4-8 prioritized recommendations
- Be specific, actionable and realistic about importance levels"""

_REQUIRED_LISTS = ("missingSkills", "recommendations")


def _validate_analysis(analysis: dict) -> None:
    if not analysis.get("overallScore") or not analysis.get("summary"):
        raise UpstreamAPIError("Incomplete analysis from AI service")
    for key in _REQUIRED_LISTS:
        if not isinstance(analysis.get(key), list):
            raise UpstreamAPIError("Incomplete analysis from AI service")


@router.options("/api/resume-gap-analysis", include_in_schema=False)
async def resume_gap_preflight(request: Request):
    return preflight(request)


@router.post("/api/resume-gap-analysis")
async def resume_gap_analysis(
    request: Request,
    payload: ResumeGapRequest,
    limit: RateLimitResult = Depends(tool_guard("resume-gap-analysis", "Gap analysis")),
):
    resume = clean_text(payload.resume, EXTRA_ALLOWED)
    target_role = clean_text(payload.target_role, EXTRA_ALLOWED)

    if len(resume) < RESUME_MIN_CHARS:
        raise ValidationFailed(f"Resume must be at least {RESUME_MIN_CHARS} characters long")
    if len(target_role) < ROLE_MIN_CHARS:
        raise ValidationFailed(f"Target role must be at least {ROLE_MIN_CHARS} characters long")
    words = word_count(resume)
    if words > RESUME_MAX_WORDS:
        raise ValidationFailed(
            f"Resume exceeds {RESUME_MAX_WORDS} word limit (current: {words} words)"
        )
    if len(resume) > RESUME_MAX_CHARS:
        raise ValidationFailed("Resume must be less than 18,000 characters")
    if len(target_role) > ROLE_MAX_CHARS:
        raise ValidationFailed(f"Target role must be less than {ROLE_MAX_CHARS} characters")

    raw = await gemini_client.generate(
        _RESUME_GAP_PROMPT.format(target_role=target_role, resume=resume),
        model=GeminiModel.FLASH,
        response_key="resume_gap_analysis",
        generation_config=_GENERATION_CONFIG,
    )
    analysis = parse_json_object(raw)
    if analysis is None:
        logger.error("Resume gap reply was not valid JSON: %.200s", raw)
        raise UpstreamAPIError("Invalid response format from AI service")
    _validate_analysis(analysis)
    logger.info("Gap analysis generated (score %s/100)", analysis["overallScore"])

    return tool_response(request, {"analysis": analysis}, limit)
