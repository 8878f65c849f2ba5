"""
GeminiClient — Async wrapper around Google Generative AI SDK.

Every career tool builds a prompt from the user's input and sends it
here. Nothing else in the API talks to the provider.

Supports two runtime modes (set via AI_MOCK_MODE env var):
  - MOCK mode (default): returns deterministic canned responses.
    Use for tests and local dev without API keys.
  - REAL mode: makes actual Gemini API calls.
    Requires GEMINI_API_KEY; without it every call raises ConfigError (503).

Failures are translated into the API's error taxonomy:
  - provider quota / HTTP 429  → UpstreamQuotaExceeded (429, never retried)
  - anything else from the SDK → UpstreamAPIError (500)
  - empty / blocked candidate  → UpstreamAPIError("No response from AI service")

Extension pattern: add new mock response keys to _MOCK_RESPONSES and
reference them in generate() calls via the response_key parameter.
"""

import json
import logging
import os
from enum import Enum
from typing import Any, Optional

# Python 3.14 + protobuf native extension can fail when importing Gemini deps.
# Keep this as default-only so users can still override it explicitly.
os.environ.setdefault("PROTOCOL_BUFFERS_PYTHON_IMPLEMENTATION", "python")

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from careertools.core.config import settings
from careertools.core.errors import ConfigError, UpstreamAPIError, UpstreamQuotaExceeded

logger = logging.getLogger(__name__)

QUOTA_MESSAGE = (
    "The AI service has reached its usage limits "
    "(free tier: 1,500 requests per day, 15 requests per minute). "
    "This is separate from this tool's own hourly limit. "
    "Please try again in a few minutes if you hit the per-minute limit, "
    "or tomorrow if the daily quota is used up."
)

# Suggested wait for the per-minute provider quota.
QUOTA_RETRY_AFTER_SECONDS = 60


class GeminiModel(str, Enum):
    FLASH = "gemini-2.5-flash"
    FLASH_LITE = "gemini-2.5-flash-lite"


# Canned responses for mock mode.
# Keys map to response_key arguments in generate() calls.
_MOCK_RESPONSES: dict[str, str] = {
    "default": (
        "[MOCK] This is a placeholder Gemini response. "
        "Set AI_MOCK_MODE=false and provide GEMINI_API_KEY for real responses."
    ),
    "keyword_extract": (
        "```json\n"
        '{"actionVerbs": ["develop", "design", "implement", "analyze", "mentor"], '
        '"technicalSkills": ["Python", "SQL", "AWS", "Docker", "React"], '
        '"softSkills": ["communication", "leadership", "problem-solving", "teamwork"]}\n'
        "```"
    ),
    "cover_letter": (
        "**[MOCK]** Your posting for this role describes exactly the work I have spent "
        "the last six years doing: building reliable data services, shipping them to "
        "production, and leading small teams through ambiguous problems.\n\n"
        "At my current company I cut report latency by 40% by redesigning the ingestion "
        "pipeline, and mentored three engineers who now own core services.\n\n"
        "I would welcome the chance to bring the same focus on measurable results to "
        "your team."
    ),
    "resume_gap_analysis": (
        '{"overallScore": 68, '
        '"summary": "[MOCK] Solid engineering foundation with gaps in cloud architecture '
        'and people leadership for the target role.", '
        '"missingSkills": ['
        '{"skill": "AWS", "importance": "critical", "reason": "Role owns cloud infrastructure."}, '
        '{"skill": "Leadership", "importance": "high", "reason": "Role manages a team of five."}'
        "], "
        '"missingCertifications": ['
        '{"certification": "AWS Solutions Architect Associate", "importance": "high", '
        '"provider": "Amazon Web Services", "reason": "Commonly requested for the role."}'
        "], "
        '"experienceGaps": ['
        '{"gap": "Budget ownership", "importance": "medium", '
        '"suggestion": "Volunteer to own a project budget."}'
        "], "
        '"strengths": ["Python", "Data pipelines", "Mentoring"], '
        '"recommendations": ['
        '{"priority": "immediate", "action": "Start AWS certification prep", '
        '"timeframe": "8 weeks", "impact": "high"}'
        "]}"
    ),
    "skill_gap_analysis": (
        '{"overallReadinessScore": 62, '
        '"summary": "[MOCK] Strong programming base; cloud and leadership skills need work.", '
        '"criticalGaps": [{"skill": "Kubernetes", "importance": 9, '
        '"currentProficiency": "None", "targetProficiency": "Advanced", '
        '"estimatedHours": 100, "difficulty": "Hard", "marketDemand": "70%"}], '
        '"importantGaps": [{"skill": "javascript", "importance": 7, '
        '"currentProficiency": "Beginner", "targetProficiency": "Intermediate", '
        '"estimatedHours": 50, "difficulty": "Medium", "marketDemand": "55%"}], '
        '"niceToHaveGaps": [{"skill": "Quantum Basket Weaving", "importance": 2, '
        '"currentProficiency": "None", "targetProficiency": "Intermediate", '
        '"estimatedHours": 15, "difficulty": "Easy", "marketDemand": "1%"}], '
        '"skillsYouHave": [{"skill": "Python", "proficiency": "Advanced", '
        '"relevanceToTarget": "High", "competitiveAdvantage": "Core language of the team."}], '
        '"learningRoadmap": {"totalEstimatedHours": 165, "estimatedWeeks": 17, "phases": []}, '
        '"competitiveAnalysis": {"yourPercentile": 55, "comparisonMessage": "Average.", '
        '"strengthAreas": ["Python"], "weaknessAreas": ["Kubernetes"]}, '
        '"actionPlan": {"weekByWeekSchedule": "10 hours per week", '
        '"portfolioProjects": ["Deploy a service to Kubernetes"], '
        '"expectedTimeToReady": "4 months"}}'
    ),
    # Insight tools: one compact, schema-shaped reply each.
    "salary_analyzer": json.dumps({
        "salaryRange": {"min": 55000, "max": 85000, "median": 68000, "currency": "GBP", "currencySymbol": "£"},
        "percentiles": {"p10": 50000, "p25": 58000, "p50": 68000, "p75": 78000, "p90": 90000},
        "confidenceScore": 72,
        "negotiationInsights": ["[MOCK] Anchor on the 75th percentile."],
        "marketInsights": ["[MOCK] Demand is steady."],
        "summary": "[MOCK] Pay sits close to the national median for the role.",
    }),
    "salary_comparison": json.dumps({
        "scenarios": [{"label": "Scenario 1", "score": 78}, {"label": "Scenario 2", "score": 64}],
        "comparison": {"bestOverall": "Scenario 1", "bestFinancial": "Scenario 1", "bestGrowth": "Scenario 2"},
        "insights": ["[MOCK] Scenario 1 pays more after cost of living."],
        "recommendations": ["[MOCK] Negotiate equity in scenario 2."],
    }),
    "career_roadmap_generator": json.dumps({
        "overviewSummary": "[MOCK] A two-phase move into the target role.",
        "estimatedDuration": "12-18 months",
        "successProbability": 70,
        "phases": [
            {"name": "Foundation", "duration": "6 months", "objectives": ["Close skill gaps"],
             "skills": ["Kubernetes"], "certifications": [], "expectedRoles": ["Senior Engineer"],
             "salaryRange": "£60k-£70k", "keyMilestones": ["Ship one platform project"]},
            {"name": "Transition", "duration": "6-12 months", "objectives": ["Move roles"],
             "skills": ["Leadership"], "certifications": [], "expectedRoles": ["Platform Engineer"],
             "salaryRange": "£70k-£85k", "keyMilestones": ["Land the new role"]},
        ],
    }),
    "next_job_recommender": json.dumps({
        "recommendations": [{"title": "Staff Engineer", "matchScore": 82, "salaryRange": "£85k-£100k"}],
        "hiddenOpportunities": [{"title": "Developer Advocate", "reason": "[MOCK] Strong communicator."}],
        "overallInsights": "[MOCK] Senior individual-contributor roles fit best.",
    }),
    "automation_risk": json.dumps({
        "automationRiskScore": 34,
        "riskCategory": "Moderate",
        "tasksAtRisk": [{"task": "Report generation", "risk": 80, "timeframe": "2-3 years"}],
        "recommendedSkills": ["[MOCK] Stakeholder management"],
    }),
    "ai_skills_readiness": json.dumps({
        "aiReadinessScore": 58,
        "scoreBreakdown": {"awareness": 70, "practicalUse": 55, "integration": 45, "learningMindset": 65},
        "actionPlan": ["[MOCK] Use an AI assistant for one task a day."],
    }),
    "future_skills_identifier": json.dumps({
        "criticalEmergingSkills": [{"skill": "AI-assisted development", "importance": 9}],
        "skillsByTimeHorizon": {"oneYear": ["Prompting"], "threeYears": ["Agent design"], "fiveYears": []},
        "competitiveAdvantage": "[MOCK] Pair domain depth with AI fluency.",
    }),
    "career_strength_index": json.dumps({
        "overallScore": 66,
        "scoreLevel": "Strong",
        "strengths": ["[MOCK] Consistent delivery"],
        "weaknesses": ["[MOCK] Low visibility"],
    }),
    "career_transition_calculator": json.dumps({
        "feasibilityScore": 64,
        "difficulty": "Moderate",
        "estimatedTimeline": "9-12 months",
        "recommendation": "[MOCK] Feasible with a bridging role.",
    }),
    "certification_roi_calculator": json.dumps({
        "roiScore": 74,
        "totalInvestment": 1800,
        "paybackPeriodMonths": 8,
        "verdict": "Recommended",
        "summary": "[MOCK] Pays back within a year.",
    }),
    "cost_of_living_calculator": json.dumps({
        "currentLocation": {"name": "London", "monthlyCost": 3200, "currency": "GBP"},
        "comparisons": [{"location": "Berlin", "monthlyCost": 2300, "differencePercent": -28}],
        "bestValue": "Berlin",
    }),
    "freelance_rate_calculator": json.dumps({
        "recommendedRates": {"hourly": {"min": 55, "max": 90, "recommended": 70}, "daily": 520},
        "incomeProjection": {"monthly": 7800, "annual": 93600, "billableHours": 26},
        "summary": "[MOCK] Price at the upper-middle of the market.",
    }),
    "global_opportunity_heatmap": json.dumps({
        "summary": "[MOCK] Strongest demand is in Western Europe and North America.",
        "topCountries": [
            {"country": "Germany", "opportunityScore": 86, "demandLevel": "Very High"},
            {"country": "Canada", "opportunityScore": 80, "demandLevel": "High"},
        ],
        "recommendations": ["[MOCK] Target EU Blue Card employers."],
    }),
    "global_relocation_affordability": json.dumps({
        "affordabilityScore": 61,
        "verdict": "Affordable",
        "movingCosts": {"total": 9500},
        "savingsRunwayMonths": 7,
    }),
    "job_demand_supply": json.dumps({
        "marketBalance": "Candidate's Market",
        "demandScore": 78,
        "supplyScore": 52,
        "competitionLevel": "Medium",
    }),
    "leadership_readiness_score": json.dumps({
        "overallScore": 63,
        "readinessLevel": "Ready Soon",
        "strengths": ["[MOCK] Mentoring"],
        "timeToReadiness": "6-9 months",
    }),
    "lifetime_earning_calculator": json.dumps({
        "totalLifetimeEarnings": 2450000,
        "remainingCareerYears": 30,
        "scenarios": {"conservative": 1900000, "expected": 2450000, "optimistic": 3100000},
    }),
    "retirement_readiness": json.dumps({
        "readinessScore": 57,
        "status": "Slightly Behind",
        "projectedSavings": 410000,
        "targetSavings": 520000,
        "savingsGap": 110000,
    }),
    "study_abroad_roi": json.dumps({
        "roiMetrics": {"breakEvenYears": 6, "tenYearROI": "140%"},
        "recommendation": {"verdict": "Recommended", "reasoning": "[MOCK] Salary premium covers the cost."},
        "scholarshipNeeded": 10000,
    }),
    "work_abroad_savings": json.dumps({
        "monthlySavings": 2100,
        "totalSavings": 50400,
        "savingsRate": "42%",
    }),
    "work_happiness_index": json.dumps({
        "happinessIndex": 68,
        "category": "Content",
        "stayOrGo": {"verdict": "Improve in place", "reasoning": "[MOCK] Growth is the only weak spot."},
    }),
    "work_life_balance_index": json.dumps({
        "balanceScore": 59,
        "category": "Fair",
        "burnoutRisk": "Moderate",
    }),
    "linkedin_profile_generate": json.dumps({
        "headlines": ["[MOCK] Backend Engineer | Python & AWS | Building Reliable Data Platforms"],
        "aboutSections": ["[MOCK] I build data services that teams can rely on."],
        "experienceDescriptions": [
            {"role": "Software Engineer", "bullets": ["Cut report latency by 40% by redesigning ingestion"]}
        ],
        "skills": {"core": ["Python", "SQL", "AWS"], "niceToHave": ["Kubernetes"]},
        "featuredIdeas": ["Write up the ingestion redesign as a case study"],
    }),
}


class GeminiClient:
    """
    Central Gemini interface for the career tools.

    Single place for timeouts, error mapping, model swaps, and mock
    injection. Don't instantiate per-request; use the module-level
    `gemini_client` singleton.
    """

    def __init__(self) -> None:
        self.mock_mode = settings.ai_mock_mode
        self.timeout = settings.gemini_timeout_seconds
        self._genai = None

        if self.mock_mode:
            logger.info("GeminiClient initialised in MOCK mode")
        elif not settings.gemini_api_key:
            logger.error("GEMINI_API_KEY not set — AI tool requests will fail with CONFIG_ERROR")
        else:
            genai.configure(api_key=settings.gemini_api_key)
            self._genai = genai
            logger.info("GeminiClient initialised in REAL mode")

    @property
    def configured(self) -> bool:
        return self.mock_mode or self._genai is not None

    async def generate(
        self,
        prompt: str,
        model: GeminiModel = GeminiModel.FLASH,
        response_key: str = "default",
        generation_config: Optional[dict[str, Any]] = None,
    ) -> str:
        """
        Generate text from a Gemini model.

        Args:
            prompt:            The full prompt string.
            model:             Which Gemini model to use.
            response_key:      Mock response key (ignored in real mode).
            generation_config: temperature / top_k / top_p / max_output_tokens etc.

        Returns:
            Generated text string.

        Raises:
            ConfigError:           no API key in real mode.
            UpstreamQuotaExceeded: the provider's own quota is exhausted.
            UpstreamAPIError:      any other provider failure or empty reply.
        """
        if self.mock_mode:
            return _MOCK_RESPONSES.get(response_key, _MOCK_RESPONSES["default"])

        if self._genai is None:
            raise ConfigError("Service configuration error")

        try:
            gemini_model = self._genai.GenerativeModel(model.value)
            response = await gemini_model.generate_content_async(
                prompt,
                generation_config=generation_config,
                request_options={"timeout": self.timeout},
            )
        except google_exceptions.ResourceExhausted as exc:
            logger.error("Gemini quota exhausted (model=%s): %s", model.value, exc)
            raise UpstreamQuotaExceeded(
                QUOTA_MESSAGE, retry_after=QUOTA_RETRY_AFTER_SECONDS
            ) from exc
        except Exception as exc:
            logger.error("Gemini API error (model=%s): %s", model.value, exc)
            raise UpstreamAPIError(f"AI service error: {_status_of(exc)}") from exc

        try:
            text = response.text
        except ValueError as exc:
            # Raised by the SDK when the candidate was blocked or empty.
            logger.error("Gemini returned no usable text (model=%s): %s", model.value, exc)
            raise UpstreamAPIError("No response from AI service") from exc

        if not text or not text.strip():
            raise UpstreamAPIError("No response from AI service")
        return text


def _status_of(exc: Exception) -> str:
    code = getattr(exc, "code", None)
    if isinstance(code, int):
        return str(int(code))
    return type(exc).__name__


# Module-level singleton — import and use this everywhere
gemini_client = GeminiClient()
