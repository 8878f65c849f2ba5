"""
skill_gap.py — Skill gap analyzer with curated learning resources.

Routes:
  OPTIONS /api/skill-gap-analyzer  — CORS preflight
  POST    /api/skill-gap-analyzer  — compare a current profile with a target
                                     role and build a learning roadmap

Gemini (flash-lite, low temperature) ranks the gaps into critical /
important / nice-to-have. Every gap then gets a `learningResources` list from
the static table in services/learning_resources.py, so resources never
depend on what the model happens to invent.
"""

import logging

from fastapi import APIRouter, Depends, Request

from careertools.ai.gemini_client import GeminiModel, gemini_client
from careertools.ai.parsing import parse_json_object
from careertools.core.errors import UpstreamAPIError, ValidationFailed
from careertools.core.rate_limit import RateLimitResult
from careertools.models.tools import SkillGapRequest
from careertools.routes.guard import preflight, tool_guard, tool_response
from careertools.services.learning_resources import resources_for

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"])

GAP_GROUPS = ("criticalGaps", "importantGaps", "niceToHaveGaps")

_GENERATION_CONFIG = {
    "temperature": 0.3,
    "top_k": 20,
    "top_p": 0.85,
    "max_output_tokens": 2500,
}

_SKILL_GAP_PROMPT = """\
Analyze the skill gap between the current and target role. Return ONLY JSON, no markdown.

INPUT:
- Current Role: {current_role}
- Years Experience: {years_experience}
- Current Skills: {current_skills}
- Target Role: {target_role}
- Industry: {industry}
- Country: {country}
- Timeline: {timeline}

OUTPUT JSON:
{{
  "overallReadinessScore": <0-100>,
  "summary": "<2 sentences on skill gap and readiness>",
  "criticalGaps": [
    {{"skill": "<skill name>", "importance": <0-10>,
      "currentProficiency": "None|Beginner|Intermediate|Advanced",
      "targetProficiency": "Intermediate|Advanced|Expert",
      "estimatedHours": <learning hours>, "difficulty": "Easy|Medium|Hard|Very Hard",
      "marketDemand": "<% of job postings requiring this>"}}
  ],
  "importantGaps": [<same shape as criticalGaps>],
  "niceToHaveGaps": [<same shape as criticalGaps>],
  "skillsYouHave": [
    {{"skill": "<skill name>", "proficiency": "Beginner|Intermediate|Advanced|Expert",
      "relevanceToTarget": "High|Medium|Low", "competitiveAdvantage": "<why this helps>"}}
  ],
  "learningRoadmap": {{
    "totalEstimatedHours": <total hours>,
    "estimatedWeeks": <weeks at 10hrs/week>,
    "phases": [{{"phase": "<name and weeks>", "skills": ["<2-3 skills>"], "milestoneProject": "<project>"}}]
  }},
  "competitiveAnalysis": {{
    "yourPercentile": <0-100>,
    "comparisonMessage": "<how you compare to typical candidates>",
    "strengthAreas": ["<2-3 areas>"],
    "weaknessAreas": ["<2-3 areas>"]
  }},
  "actionPlan": {{
    "weekByWeekSchedule": "<suggested weekly structure>",
    "portfolioProjects": ["<3 projects>"],
    "expectedTimeToReady": "<X months>"
  }}
}}"""


def attach_learning_resources(analysis: dict) -> dict:
    """Add `learningResources` to every gap entry that names a skill."""
    for group in GAP_GROUPS:
        gaps = analysis.get(group)
        if not isinstance(gaps, list):
            continue
        for gap in gaps:
            if isinstance(gap, dict):
                skill = str(gap.get("skill") or "")
                gap["learningResources"] = [r.model_dump() for r in resources_for(skill)]
    return analysis


@router.options("/api/skill-gap-analyzer", include_in_schema=False)
async def skill_gap_preflight(request: Request):
    return preflight(request)


@router.post("/api/skill-gap-analyzer")
async def skill_gap_analyzer(
    request: Request,
    payload: SkillGapRequest,
    limit: RateLimitResult = Depends(tool_guard("skill-gap-analyzer", "Skill gap analysis")),
):
    required = (payload.current_role, payload.target_role, payload.industry, payload.country)
    if not all(value.strip() for value in required):
        raise ValidationFailed("Missing required fields")

    prompt = _SKILL_GAP_PROMPT.format(
        current_role=payload.current_role.strip(),
        years_experience=payload.years_experience if payload.years_experience is not None else "Not specified",
        current_skills=", ".join(payload.current_skills) or "None listed",
        target_role=payload.target_role.strip(),
        industry=payload.industry.strip(),
        country=payload.country.strip(),
        timeline=payload.timeline or "Not specified",
    )
    raw = await gemini_client.generate(
        prompt,
        model=GeminiModel.FLASH_LITE,
        response_key="skill_gap_analysis",
        generation_config=_GENERATION_CONFIG,
    )
    analysis = parse_json_object(raw)
    if analysis is None:
        logger.error("Skill gap reply was not valid JSON: %.200s", raw)
        raise UpstreamAPIError("Invalid AI response format")

    attach_learning_resources(analysis)
    return tool_response(request, {"analysis": analysis}, limit)
