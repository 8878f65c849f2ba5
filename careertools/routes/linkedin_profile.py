"""
linkedin_profile.py — LinkedIn profile content from an uploaded resume.

Routes:
  OPTIONS /api/linkedin-profile-generate  — CORS preflight
  POST    /api/linkedin-profile-generate  — multipart form: resume (PDF/DOCX)
                                            plus targeting fields

The only tool that takes a file. The Request Gate is given a ceiling large
enough for a 5 MB resume plus form overhead, and the file size itself is
checked here. Text is pulled out with services/resume_text.py and capped
before it goes into the prompt.

If Gemini's reply is not JSON the user still gets a generic profile built
from their own form answers, the same way keyword extraction falls back.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from careertools.ai.gemini_client import GeminiModel, gemini_client
from careertools.ai.parsing import parse_json_object
from careertools.core.errors import ValidationFailed
from careertools.core.rate_limit import RateLimitResult
from careertools.routes.guard import preflight, tool_guard, tool_response
from careertools.services.resume_text import SUPPORTED_TYPES, ResumeExtractionError, extract_resume_text

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"])

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
GATE_CEILING_BYTES = MAX_UPLOAD_BYTES + 1024 * 1024
MAX_RESUME_CHARS = 8000
MIN_RESUME_CHARS = 50
DEFAULT_TONE = "professional"

_GENERATION_CONFIG = {
    "temperature": 0.8,
    "top_k": 40,
    "top_p": 0.95,
    "max_output_tokens": 8192,
}

_LINKEDIN_PROMPT = """\
You are an expert LinkedIn profile writer and career coach. Analyze this resume and \
generate compelling LinkedIn profile content.

RESUME CONTENT:
{resume_text}

PROFILE REQUIREMENTS:
- Target Industry: {target_industry}
- Career Stage: {career_stage}
- Primary Goal: {primary_goal}
- Tone: {tone}
{optional_lines}
Return ONLY valid JSON with this structure:
{{
  "headlines": ["<3-5 variations, each under 220 characters: role + value proposition + key skills>"],
  "aboutSections": ["<2-3 variations, each under 2600 characters: hook, story, achievements, call to action>"],
  "experienceDescriptions": [
    {{"role": "<most recent or relevant job title>",
      "bullets": ["<3-5 bullets: action verb + task + quantified result>"]}}
  ],
  "skills": {{"core": ["<top 25 skills>"], "niceToHave": ["<25 complementary skills>"]}},
  "featuredIdeas": ["<5-7 Featured section suggestions>"]
}}

Make all content ATS-friendly and keyword-rich, quantify achievements where possible, \
keep the tone {tone}, and focus on {primary_goal}."""


def fallback_content(target_industry: str, career_stage: str, primary_goal: str) -> dict:
    return {
        "headlines": [
            f"{target_industry} Professional | {career_stage} | Driving Innovation & Growth",
            f"Experienced {target_industry} Leader | {primary_goal} | Results-Driven Professional",
            f"{career_stage} {target_industry} Expert | Passionate About {primary_goal}",
        ],
        "aboutSections": [
            f"As a {career_stage} professional in {target_industry}, I bring a proven track "
            f"record of delivering results. My focus on {primary_goal} has let me create real "
            "value for the organisations I work with.\n\n"
            "I care about continuous learning, good teamwork and building strong professional "
            "relationships.\n\n"
            f"Let's connect if you're interested in {primary_goal} or opportunities in {target_industry}."
        ],
        "experienceDescriptions": [
            {
                "role": "Professional Experience",
                "bullets": [
                    "Demonstrated expertise in core competencies relevant to the role",
                    "Achieved measurable results through strategic initiatives",
                    "Collaborated with cross-functional teams to drive success",
                ],
            }
        ],
        "skills": {
            "core": ["Leadership", "Strategy", "Communication", "Problem Solving", "Project Management"],
            "niceToHave": ["Teamwork", "Adaptability", "Innovation", "Analytics", "Customer Focus"],
        },
        "featuredIdeas": [
            "Share industry-relevant articles or blog posts",
            "Showcase project portfolio or case studies",
            "Highlight certifications and professional development",
            "Feature recommendations from colleagues",
            "Display awards and recognitions",
        ],
    }


def normalize_content(content: dict) -> dict:
    """Guarantee every section exists with the type the profile editor expects."""
    for key in ("headlines", "aboutSections", "experienceDescriptions", "featuredIdeas"):
        if not isinstance(content.get(key), list):
            content[key] = []
    if not isinstance(content.get("skills"), dict):
        content["skills"] = {"core": [], "niceToHave": []}
    return content


@router.options("/api/linkedin-profile-generate", include_in_schema=False)
async def linkedin_profile_preflight(request: Request):
    return preflight(request)


@router.post("/api/linkedin-profile-generate")
async def linkedin_profile_generate(
    request: Request,
    resume: Optional[UploadFile] = File(None),
    target_industry: Optional[str] = Form(None, alias="targetIndustry"),
    career_stage: Optional[str] = Form(None, alias="careerStage"),
    primary_goal: Optional[str] = Form(None, alias="primaryGoal"),
    current_linkedin_url: Optional[str] = Form(None, alias="currentLinkedInUrl"),
    target_companies: Optional[str] = Form(None, alias="targetCompanies"),
    tone_preference: Optional[str] = Form(None, alias="tonePreference"),
    limit: RateLimitResult = Depends(
        tool_guard("linkedin-profile-generate", "Profile generation", max_request_size=GATE_CEILING_BYTES)
    ),
):
    if resume is None:
        raise ValidationFailed("Resume file is required")
    if not all((value or "").strip() for value in (target_industry, career_stage, primary_goal)):
        raise ValidationFailed("Target industry, career stage, and primary goal are required")
    if resume.content_type not in SUPPORTED_TYPES:
        raise ValidationFailed("Only PDF and DOCX files are supported")

    content = await resume.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise ValidationFailed("File size must be less than 5MB")

    try:
        resume_text = extract_resume_text(content, resume.content_type)
    except ResumeExtractionError as exc:
        raise ValidationFailed(str(exc)) from exc

    resume_text = resume_text[:MAX_RESUME_CHARS]
    if len(resume_text) < MIN_RESUME_CHARS:
        raise ValidationFailed(
            "Could not extract sufficient text from resume. Please ensure the file is readable."
        )

    industry, stage, goal = target_industry.strip(), career_stage.strip(), primary_goal.strip()
    tone = (tone_preference or "").strip() or DEFAULT_TONE
    optional_lines = ""
    if current_linkedin_url:
        optional_lines += f"- Current LinkedIn: {current_linkedin_url.strip()}\n"
    if target_companies:
        optional_lines += f"- Target Companies/Roles: {target_companies.strip()}\n"

    prompt = _LINKEDIN_PROMPT.format(
        resume_text=resume_text,
        target_industry=industry,
        career_stage=stage,
        primary_goal=goal,
        tone=tone,
        optional_lines=optional_lines,
    )
    raw = await gemini_client.generate(
        prompt,
        model=GeminiModel.FLASH_LITE,
        response_key="linkedin_profile_generate",
        generation_config=_GENERATION_CONFIG,
    )
    profile = parse_json_object(raw)
    if profile is None:
        logger.warning("LinkedIn reply was not valid JSON, using fallback content")
        profile = fallback_content(industry, stage, goal)

    return tool_response(request, {"content": normalize_content(profile)}, limit)
