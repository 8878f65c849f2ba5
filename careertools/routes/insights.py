"""
insights.py — The prompt-and-answer career tools.

Twenty-odd tools share one shape: validate a form, turn it into a prompt,
ask Gemini for a JSON object, and return that object under a fixed key. They
are described once in INSIGHT_TOOLS and registered from the table:

  OPTIONS /api/<slug>  — CORS preflight
  POST    /api/<slug>  — run the tool; 200 {<result key>: {...}, processingTime, success}

Each InsightTool names its request model, the fields that must be filled
in, the prompt template and the Gemini model and settings. The prompt's
INPUT block is rendered from the request model, so adding a form field only
means adding it to the model. Tools that need more than that hook in:

  prepare(payload) → extra prompt fields; may raise ValidationFailed
  finish(payload, result, extra) → the value returned under the result key

Guarding, rate limiting and error bodies are the same as every other tool
route (see routes/guard.py). Tools without their own entry in ROUTE_LIMITS
use the default budget.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from careertools.ai.gemini_client import GeminiModel, gemini_client
from careertools.ai.parsing import parse_json_object
from careertools.core.errors import UpstreamAPIError, ValidationFailed
from careertools.core.rate_limit import RateLimitResult
from careertools.models.insights import (
    AISkillsReadinessRequest,
    AutomationRiskRequest,
    CareerRoadmapRequest,
    CareerStrengthRequest,
    CareerTransitionRequest,
    CertificationROIRequest,
    CostOfLivingRequest,
    FreelanceRateRequest,
    FutureSkillsRequest,
    GlobalOpportunityRequest,
    JobDemandSupplyRequest,
    LeadershipReadinessRequest,
    LifetimeEarningRequest,
    NextJobRequest,
    RelocationAffordabilityRequest,
    RetirementReadinessRequest,
    SalaryAnalyzerRequest,
    SalaryComparisonRequest,
    StudyAbroadRequest,
    WorkAbroadSavingsRequest,
    WorkHappinessRequest,
    WorkLifeBalanceRequest,
)
from careertools.routes.guard import preflight, tool_guard, tool_response
from careertools.services.currency import currency_for
from careertools.services.leadership_resources import recommended_resources, select_certifications
from careertools.services.study_abroad import roi_breakdown

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tools"])

NOT_SPECIFIED = "Not specified"
MAX_HEATMAP_SKILLS = 20


def _config(temperature: float, max_tokens: int, top_k: Optional[int] = None, top_p: Optional[float] = None) -> dict:
    config: dict[str, Any] = {"temperature": temperature, "max_output_tokens": max_tokens}
    if top_k is not None:
        config["top_k"] = top_k
    if top_p is not None:
        config["top_p"] = top_p
    return config


@dataclass(frozen=True)
class InsightTool:
    slug: str
    label: str
    request_model: type[BaseModel]
    required: tuple[str, ...]
    missing_message: str
    prompt: str
    result_key: str
    model: GeminiModel = GeminiModel.FLASH_LITE
    generation_config: dict = field(default_factory=dict)
    invalid_message: str = "Invalid AI response format"
    prepare: Optional[Callable[[Any], dict]] = None
    finish: Optional[Callable[[Any, dict, dict], dict]] = None

    @property
    def path(self) -> str:
        return f"/api/{self.slug}"

    @property
    def response_key(self) -> str:
        return self.slug.replace("-", "_")


# ── Input rendering ───────────────────────────────────────────────────────────

def is_blank(value: Any) -> bool:
    """True for None, whitespace-only strings and empty collections. 0 is an answer."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def render_value(value: Any) -> str:
    if is_blank(value):
        return NOT_SPECIFIED
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ", ".join(render_value(v) for v in value)
    if isinstance(value, dict):
        return ", ".join(f"{k}: {render_value(v)}" for k, v in value.items())
    if isinstance(value, BaseModel):
        return render_value(value.model_dump(by_alias=True, exclude_none=True))
    return str(value).strip()


def render_inputs(payload: BaseModel) -> str:
    """One "- Label: value" line per form field, in model order."""
    lines = []
    for name, info in type(payload).model_fields.items():
        label = info.title or name.replace("_", " ").title()
        lines.append(f"- {label}: {render_value(getattr(payload, name))}")
    return "\n".join(lines)


# ── Hooks ─────────────────────────────────────────────────────────────────────

def _salary_currency(payload: SalaryAnalyzerRequest) -> dict:
    code, symbol = currency_for(payload.country.strip())
    return {"currency": code, "currency_symbol": symbol}


def _salary_scenarios(payload: SalaryComparisonRequest) -> dict:
    if len(payload.scenarios) < 2:
        raise ValidationFailed("At least 2 scenarios are required for comparison")
    blocks = [
        f"Scenario {number}: {render_value(scenario)}"
        for number, scenario in enumerate(payload.scenarios, start=1)
    ]
    return {"scenarios": "\n".join(blocks), "count": len(payload.scenarios)}


def _check_roadmap(payload: CareerRoadmapRequest, roadmap: dict, extra: dict) -> dict:
    phases = roadmap.get("phases")
    if not isinstance(phases, list) or not phases:
        raise UpstreamAPIError("Invalid roadmap structure generated")
    return roadmap


def _heatmap_inputs(payload: GlobalOpportunityRequest) -> dict:
    years = payload.years_of_experience
    if years is None or not 0 <= years <= 50:
        raise ValidationFailed("Years of experience must be a number between 0 and 50")
    skills = [s.strip() for s in payload.skills if s.strip()]
    if not skills:
        raise ValidationFailed("At least one skill is required")
    if len(skills) > MAX_HEATMAP_SKILLS:
        raise ValidationFailed(f"Maximum {MAX_HEATMAP_SKILLS} skills allowed")
    return {
        "job_title": payload.job_title.strip()[:100],
        "years": render_value(years),
        "skills": ", ".join(skills),
        "industry": (payload.industry or "").strip()[:100] or NOT_SPECIFIED,
        "work_mode": payload.work_mode or "any",
        "salary_expectation": payload.salary_expectation or "market_rate",
        "visa": "Yes" if payload.visa_requirement else "No",
    }


def _check_heatmap(payload: GlobalOpportunityRequest, analysis: dict, extra: dict) -> dict:
    if not analysis.get("summary") or not analysis.get("topCountries"):
        raise UpstreamAPIError("Incomplete analysis from AI service")
    return analysis


def _leadership_extras(payload: LeadershipReadinessRequest, assessment: dict, extra: dict) -> dict:
    certifications = select_certifications(payload.leadership_skills, payload.target_role)
    assessment["recommendedCertifications"] = [c.model_dump(by_alias=True) for c in certifications]
    assessment["recommendedResources"] = [r.model_dump() for r in recommended_resources()]
    return assessment


def _study_abroad_costs(payload: StudyAbroadRequest) -> dict:
    breakdown = roi_breakdown(payload)
    return {
        "breakdown": breakdown,
        "years": render_value(payload.program_duration or 2),
        "net_investment": f"{breakdown['netInvestment']:.0f}",
        "expected_salary": render_value(payload.expected_salary_post_grad),
        "target_work_country": render_value(payload.target_work_country),
        "target_career": render_value(payload.target_career_field),
    }


def _merge_study_abroad(payload: StudyAbroadRequest, analysis: dict, extra: dict) -> dict:
    return {**extra["breakdown"], **analysis}


# ── Prompts ───────────────────────────────────────────────────────────────────
# Every template takes {inputs}; hook-supplied fields are named in the template.

_JSON_ONLY = "Return ONLY valid JSON, no markdown, no text outside the JSON object."

_SALARY_ANALYZER_PROMPT = """\
Analyze the market salary for this profile. {json_only}

INPUT:
{inputs}

OUTPUT JSON (all salary amounts in {currency} without currency symbols):
{{
  "salaryRange": {{"min": <number>, "max": <number>, "median": <number>,
                   "currency": "{currency}", "currencySymbol": "{currency_symbol}"}},
  "percentiles": {{"p10": <n>, "p25": <n>, "p50": <n>, "p75": <n>, "p90": <n>}},
  "confidenceScore": <0-100>,
  "salaryBreakdown": {{"baseSalary": <n>, "bonus": <n>, "equity": <n>, "benefits": <n>}},
  "yearOverYearGrowth": "<% trend>",
  "countryComparisons": [{{"country": "<name>", "median": <n>, "currency": "<code>"}}],
  "experienceImpact": [{{"years": "<range>", "median": <n>}}],
  "industryComparisons": [{{"industry": "<name>", "median": <n>}}],
  "costOfLivingAdjusted": {{"index": <n>, "adjustedMedian": <n>}},
  "negotiationInsights": ["<3-5 tips>"],
  "marketInsights": ["<3-5 observations>"],
  "summary": "<2-3 sentences>"
}}"""

_SALARY_COMPARISON_PROMPT = """\
Compare these {count} job offers or salary scenarios side by side. {json_only}

SCENARIOS:
{scenarios}

OUTPUT JSON:
{{
  "scenarios": [{{"label": "<scenario name>", "totalCompensation": <n>,
                  "costOfLivingAdjusted": <n>, "takeHomeEstimate": <n>,
                  "pros": ["<2-3>"], "cons": ["<2-3>"], "score": <0-100>}}],
  "comparison": {{"bestOverall": "<label>", "bestFinancial": "<label>",
                  "bestGrowth": "<label>", "differenceSummary": "<2 sentences>"}},
  "insights": ["<3-5 observations>"],
  "recommendations": ["<3-5 actions>"]
}}"""

_CAREER_ROADMAP_PROMPT = """\
Create a realistic, phased career roadmap from the current role to the target role. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "overviewSummary": "<3 sentences>",
  "estimatedDuration": "<e.g. 18-24 months>",
  "successProbability": <0-100>,
  "phases": [{{"name": "<phase>", "duration": "<months>", "objectives": ["<2-4>"],
               "skills": ["<2-4>"], "certifications": ["<0-2>"], "expectedRoles": ["<1-3>"],
               "salaryRange": "<range>", "keyMilestones": ["<2-3>"]}}],
  "skillsDevelopment": {{"technical": ["<skills>"], "soft": ["<skills>"]}},
  "experienceMilestones": ["<3-5>"],
  "networkingBrand": ["<3-5 actions>"],
  "alternativePaths": [{{"path": "<route>", "description": "<why>"}}],
  "risksReality": {{"challenges": ["<2-4>"], "mitigations": ["<2-4>"]}},
  "actionableTasks": {{"next30Days": ["<3>"], "next90Days": ["<3>"]}},
  "marketInsights": ["<3-5>"]
}}"""

_NEXT_JOB_PROMPT = """\
Recommend the best next roles for this professional. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "recommendations": [{{"title": "<role>", "matchScore": <0-100>, "salaryRange": "<range>",
                        "whyGoodFit": "<2 sentences>", "skillsToGain": ["<2-4>"],
                        "timeToTransition": "<months>", "companies": ["<3 examples>"]}}],
  "hiddenOpportunities": [{{"title": "<role>", "reason": "<why overlooked>"}}],
  "overallInsights": "<3 sentences>"
}}"""

_AUTOMATION_RISK_PROMPT = """\
Assess how exposed this job is to automation and AI over the next 5-10 years. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "automationRiskScore": <0-100>,
  "riskCategory": "Low|Moderate|High|Very High",
  "tasksAtRisk": [{{"task": "<task>", "risk": <0-100>, "timeframe": "<years>"}}],
  "tasksLikelyHuman": [{{"task": "<task>", "reason": "<why>"}}],
  "roleEvolution": "<2-3 sentences>",
  "industryDisruption": "<2 sentences>",
  "riskFactors": ["<3-5>"],
  "protectiveFactors": ["<3-5>"],
  "actionPlan": [{{"action": "<step>", "timeframe": "<when>", "impact": "high|medium|low"}}],
  "alternativeCareerPaths": [{{"role": "<role>", "riskScore": <0-100>, "transitionDifficulty": "<level>"}}],
  "recommendedSkills": ["<4-6>"],
  "scenarioAnalysis": {{"optimistic": "<1 sentence>", "realistic": "<1 sentence>", "pessimistic": "<1 sentence>"}}
}}"""

_AI_SKILLS_PROMPT = """\
Score this professional's readiness to work with AI tools. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "aiReadinessScore": <0-100>,
  "scoreBreakdown": {{"awareness": <0-100>, "practicalUse": <0-100>,
                      "integration": <0-100>, "learningMindset": <0-100>}},
  "toolAssessment": [{{"tool": "<name>", "relevance": "high|medium|low", "recommendation": "<1 sentence>"}}],
  "learningPath": [{{"stage": "<name>", "duration": "<weeks>", "topics": ["<2-4>"], "resources": ["<1-3>"]}}],
  "roleSpecificRecommendations": ["<3-5>"],
  "industryBenchmark": {{"averageScore": <0-100>, "yourPosition": "<comparison>"}},
  "actionPlan": ["<3-5 next steps>"]
}}"""

_FUTURE_SKILLS_PROMPT = """\
As a career trends analyst, identify the emerging skills that will be critical for this \
professional in the next 2-5 years. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "criticalEmergingSkills": [{{"skill": "<name>", "importance": <0-10>, "demandGrowth": "<% trend>",
                              "timeToLearn": "<estimate>", "whyCritical": "<1 sentence>"}}],
  "skillsByTimeHorizon": {{"oneYear": ["<skills>"], "threeYears": ["<skills>"], "fiveYears": ["<skills>"]}},
  "skillsByCategory": {{"technical": ["<skills>"], "human": ["<skills>"], "business": ["<skills>"]}},
  "industryTrends": ["<3-5>"],
  "learningPathway": [{{"step": "<name>", "focus": "<skill>", "duration": "<weeks>"}}],
  "competitiveAdvantage": "<2 sentences>"
}}"""

_CAREER_STRENGTH_PROMPT = """\
Score the overall strength of this career profile on the job market. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "overallScore": <0-100>,
  "scoreLevel": "Emerging|Developing|Strong|Exceptional",
  "dimensionScores": {{"skills": <0-100>, "experience": <0-100>, "network": <0-100>,
                       "visibility": <0-100>, "marketDemand": <0-100>}},
  "strengths": ["<3-5>"],
  "weaknesses": ["<3-5>"],
  "marketPosition": "<2 sentences>",
  "improvementPlan": [{{"area": "<dimension>", "action": "<step>", "impact": <points>}}],
  "peerComparison": {{"percentile": <0-100>, "summary": "<1 sentence>"}}
}}"""

_CAREER_TRANSITION_PROMPT = """\
Evaluate the feasibility, cost and timeline of this career change. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "feasibilityScore": <0-100>,
  "difficulty": "Easy|Moderate|Challenging|Very Challenging",
  "estimatedTimeline": "<months>",
  "transferableSkills": [{{"skill": "<name>", "relevance": "high|medium|low"}}],
  "skillGaps": [{{"skill": "<name>", "timeToAcquire": "<estimate>"}}],
  "financialImpact": {{"expectedSalaryChange": "<%>", "transitionCost": <n>, "breakEvenMonths": <n>}},
  "transitionPaths": [{{"path": "<route>", "duration": "<months>", "risk": "low|medium|high"}}],
  "risks": ["<3-5>"],
  "actionPlan": [{{"phase": "<name>", "steps": ["<2-4>"]}}],
  "recommendation": "<2-3 sentences>"
}}"""

_CERTIFICATION_ROI_PROMPT = """\
Estimate the return on investment of this professional certification. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "roiScore": <0-100>,
  "totalInvestment": <n>,
  "expectedSalaryIncrease": {{"min": <n>, "max": <n>, "percentage": "<%>"}},
  "paybackPeriodMonths": <n>,
  "fiveYearROI": "<%>",
  "marketDemand": "High|Medium|Low",
  "careerOpportunities": ["<3-5 roles>"],
  "alternatives": [{{"certification": "<name>", "reason": "<why>"}}],
  "verdict": "Highly Recommended|Recommended|Consider Alternatives|Not Recommended",
  "summary": "<2-3 sentences>"
}}"""

_COST_OF_LIVING_PROMPT = """\
Compare the cost of living between the current location and each target location. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "currentLocation": {{"name": "<city>", "monthlyCost": <n>, "currency": "<code>"}},
  "comparisons": [{{"location": "<city>", "monthlyCost": <n>, "differencePercent": <n>,
                    "breakdown": {{"housing": <n>, "food": <n>, "transport": <n>,
                                   "utilities": <n>, "healthcare": <n>, "other": <n>}},
                    "salaryNeeded": <n>}}],
  "bestValue": "<location>",
  "insights": ["<3-5>"],
  "recommendations": ["<3-5>"]
}}"""

_FREELANCE_RATE_PROMPT = """\
Recommend freelance rates for this profile, assuming the weekly hours given. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "recommendedRates": {{"hourly": {{"min": <n>, "max": <n>, "recommended": <n>}},
                        "daily": <n>, "projectBased": "<guidance>", "retainer": <monthly n>}},
  "marketComparison": {{"percentile": <0-100>, "marketAverage": <n>}},
  "incomeProjection": {{"monthly": <n>, "annual": <n>, "billableHours": <n>}},
  "pricingStrategy": ["<3-5>"],
  "rateIncreaseRoadmap": [{{"milestone": "<trigger>", "newRate": <n>}}],
  "clientAcquisition": ["<3-5>"],
  "summary": "<2 sentences>"
}}"""

_HEATMAP_PROMPT = """\
Map the best countries worldwide for this professional to find work. {json_only}

PROFILE:
- Job Title: {job_title}
- Years of Experience: {years}
- Skills: {skills}
- Industry: {industry}
- Work Mode: {work_mode}
- Salary Expectation: {salary_expectation}
- Needs Visa Sponsorship: {visa}

OUTPUT JSON:
{{
  "summary": "<2-3 sentences>",
  "topCountries": [{{"country": "<name>", "opportunityScore": <0-100>, "demandLevel": "Very High|High|Medium|Low",
                     "averageSalary": "<range with currency>", "visaDifficulty": "Easy|Moderate|Hard",
                     "topCities": ["<2-3>"], "keyEmployers": ["<2-3>"], "highlights": "<1 sentence>"}}],
  "regionalInsights": [{{"region": "<name>", "outlook": "<1 sentence>"}}],
  "remoteOpportunities": "<1-2 sentences>",
  "recommendations": ["<3-5>"]
}}"""

_RELOCATION_PROMPT = """\
Work out whether this international move is affordable and what it will cost. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "affordabilityScore": <0-100>,
  "verdict": "Very Affordable|Affordable|Stretch|Unaffordable",
  "movingCosts": {{"shipping": <n>, "flights": <n>, "visa": <n>, "housingDeposit": <n>,
                   "pets": <n>, "vehicle": <n>, "total": <n>}},
  "monthlyBudget": {{"before": <n>, "after": <n>, "difference": <n>}},
  "savingsRunwayMonths": <n>,
  "breakEvenMonths": <n>,
  "hiddenCosts": ["<3-5>"],
  "recommendations": ["<3-5>"]
}}"""

_JOB_DEMAND_PROMPT = """\
Analyze hiring demand against candidate supply for this role and market. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "marketBalance": "Candidate's Market|Balanced|Employer's Market",
  "demandScore": <0-100>,
  "supplyScore": <0-100>,
  "competitionLevel": "Low|Medium|High|Very High",
  "openPositionsEstimate": "<range>",
  "averageTimeToHire": "<weeks>",
  "salaryTrend": "<% trend>",
  "inDemandSkills": ["<4-6>"],
  "yourCompetitiveness": {{"score": <0-100>, "advantages": ["<2-3>"], "gaps": ["<2-3>"]}},
  "recommendations": ["<3-5>"]
}}"""

_LEADERSHIP_PROMPT = """\
Score readiness to step into the target leadership role. Do not recommend certifications \
or reading; those are added separately. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "overallScore": <0-100>,
  "readinessLevel": "Not Ready|Developing|Ready Soon|Ready Now",
  "dimensionScores": {{"strategicThinking": <0-100>, "peopleManagement": <0-100>,
                       "communication": <0-100>, "decisionMaking": <0-100>,
                       "emotionalIntelligence": <0-100>}},
  "strengths": ["<3-4>"],
  "developmentAreas": [{{"area": "<name>", "priority": "high|medium|low", "suggestion": "<1 sentence>"}}],
  "timeToReadiness": "<months>",
  "nextSteps": ["<3-5>"]
}}"""

_LIFETIME_EARNING_PROMPT = """\
Project total career earnings from now until retirement. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "totalLifetimeEarnings": <n>,
  "remainingCareerYears": <n>,
  "peakEarningAge": <n>,
  "peakSalary": <n>,
  "earningsByDecade": [{{"decade": "<age range>", "total": <n>, "averageSalary": <n>}}],
  "scenarios": {{"conservative": <n>, "expected": <n>, "optimistic": <n>}},
  "boostingFactors": [{{"factor": "<change>", "impact": <n>}}],
  "recommendations": ["<3-5>"]
}}"""

_RETIREMENT_PROMPT = """\
Assess whether this person is on track for the retirement they want. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "readinessScore": <0-100>,
  "status": "On Track|Slightly Behind|Behind|Significantly Behind",
  "projectedSavings": <n>,
  "targetSavings": <n>,
  "savingsGap": <n>,
  "monthlyIncomeInRetirement": <n>,
  "yearsFundsWillLast": <n>,
  "countrySpecificInsights": ["<2-4 pension and tax notes>"],
  "recommendations": [{{"action": "<step>", "impact": "<effect>", "priority": "high|medium|low"}}],
  "scenarios": {{"conservative": <n>, "expected": <n>, "optimistic": <n>}}
}}"""

_STUDY_ABROAD_PROMPT = """\
Analyze study abroad ROI. {json_only}

INPUT:
- Country: {country}
- Degree: {degree_level} in {field_of_study}
- Program Duration: {years} years
- Total Net Investment: ${net_investment}
- Expected Post-Grad Salary: ${expected_salary}
- Target Work Country: {target_work_country}
- Target Career: {target_career}

OUTPUT JSON:
{{
  "salaryBoostAnalysis": {{"withDegree": <n>, "withoutDegree": <n>, "annualPremium": <n>}},
  "careerOpportunities": ["<3-5>"],
  "immigrationBenefits": ["<2-4 post-study work or residency routes>"],
  "roiMetrics": {{"breakEvenYears": <n>, "tenYearROI": "<%>", "lifetimeValue": <n>}},
  "financialViability": "<2 sentences>",
  "riskFactors": ["<3-5>"],
  "recommendation": {{"verdict": "Strongly Recommended|Recommended|Proceed with Caution|Not Recommended",
                      "reasoning": "<2 sentences>"}},
  "alternatives": ["<2-3 cheaper or faster options>"],
  "scholarshipNeeded": <n>
}}"""

_WORK_ABROAD_PROMPT = """\
Estimate how much this person can save by taking the overseas contract. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "monthlySavings": <n>,
  "totalSavings": <n>,
  "savingsRate": "<%>",
  "comparisonWithHome": {{"homeMonthlySavings": <n>, "abroadMonthlySavings": <n>, "difference": <n>}},
  "taxConsiderations": ["<2-4>"],
  "hiddenCosts": ["<2-4>"],
  "savingsGoalProgress": {{"achievable": <true|false>, "monthsToGoal": <n>}},
  "recommendations": ["<3-5>"]
}}"""

_WORK_HAPPINESS_PROMPT = """\
Compute a weighted work happiness index from the ratings (1-10) and importance weights. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "happinessIndex": <0-100>,
  "category": "Thriving|Content|Neutral|Struggling|Burnout Risk",
  "dimensionAnalysis": [{{"dimension": "<name>", "rating": <1-10>, "weight": <n>,
                          "weightedScore": <n>, "status": "strength|ok|concern"}}],
  "keyDrivers": ["<2-3>"],
  "painPoints": ["<2-3>"],
  "recommendations": [{{"area": "<dimension>", "action": "<step>"}}],
  "stayOrGo": {{"verdict": "Stay|Improve in place|Explore options|Leave", "reasoning": "<2 sentences>"}}
}}"""

_WORK_LIFE_BALANCE_PROMPT = """\
Score this person's work-life balance. {json_only}

INPUT:
{inputs}

OUTPUT JSON:
{{
  "balanceScore": <0-100>,
  "category": "Excellent|Good|Fair|Poor|Critical",
  "dimensionScores": {{"workload": <0-100>, "boundaries": <0-100>, "health": <0-100>,
                       "relationships": <0-100>, "personalGrowth": <0-100>}},
  "burnoutRisk": "Low|Moderate|High|Very High",
  "redFlags": ["<0-4>"],
  "strengths": ["<2-3>"],
  "recommendations": [{{"action": "<step>", "impact": "high|medium|low", "timeframe": "<when>"}}]
}}"""


# ── Table ─────────────────────────────────────────────────────────────────────

INSIGHT_TOOLS: tuple[InsightTool, ...] = (
    InsightTool(
        slug="salary-analyzer",
        label="Salary analysis",
        request_model=SalaryAnalyzerRequest,
        required=("country", "job_title", "industry", "years_experience"),
        missing_message="Missing required fields",
        prompt=_SALARY_ANALYZER_PROMPT,
        result_key="analysis",
        generation_config=_config(0.3, 2500, top_k=20, top_p=0.85),
        prepare=_salary_currency,
    ),
    InsightTool(
        slug="salary-comparison",
        label="Salary comparison",
        request_model=SalaryComparisonRequest,
        required=(),
        missing_message="At least 2 scenarios are required for comparison",
        prompt=_SALARY_COMPARISON_PROMPT,
        result_key="analysis",
        generation_config=_config(0.3, 4096),
        prepare=_salary_scenarios,
    ),
    InsightTool(
        slug="career-roadmap-generator",
        label="Career roadmap generation",
        request_model=CareerRoadmapRequest,
        required=("current_role", "target_role", "current_industry", "country"),
        missing_message="Missing required fields",
        prompt=_CAREER_ROADMAP_PROMPT,
        result_key="roadmap",
        model=GeminiModel.FLASH,
        generation_config=_config(0.4, 4000, top_k=30, top_p=0.9),
        finish=_check_roadmap,
    ),
    InsightTool(
        slug="next-job-recommender",
        label="Next job recommendation",
        request_model=NextJobRequest,
        required=("current_role", "industry", "years_experience"),
        missing_message="Missing required fields: currentRole, industry, yearsExperience",
        prompt=_NEXT_JOB_PROMPT,
        result_key="recommendations",
        generation_config=_config(0.4, 8192),
    ),
    InsightTool(
        slug="automation-risk",
        label="Automation risk analysis",
        request_model=AutomationRiskRequest,
        required=("job_title", "industry"),
        missing_message="Missing required fields: jobTitle, industry",
        prompt=_AUTOMATION_RISK_PROMPT,
        result_key="analysis",
        generation_config=_config(0.7, 4000),
    ),
    InsightTool(
        slug="ai-skills-readiness",
        label="AI skills readiness assessment",
        request_model=AISkillsReadinessRequest,
        required=("current_role", "industry", "experience_level"),
        missing_message="Missing required fields: currentRole, industry, experienceLevel",
        prompt=_AI_SKILLS_PROMPT,
        result_key="data",
        generation_config=_config(0.7, 2048, top_k=40, top_p=0.95),
        invalid_message="Failed to parse AI response",
    ),
    InsightTool(
        slug="future-skills-identifier",
        label="Future skills analysis",
        request_model=FutureSkillsRequest,
        required=("current_role", "industry", "years_experience"),
        missing_message="Missing required fields: currentRole, industry, yearsExperience",
        prompt=_FUTURE_SKILLS_PROMPT,
        result_key="analysis",
        generation_config=_config(0.7, 4000),
    ),
    InsightTool(
        slug="career-strength-index",
        label="Career strength assessment",
        request_model=CareerStrengthRequest,
        required=("current_role", "industry", "education"),
        missing_message="Missing required fields",
        prompt=_CAREER_STRENGTH_PROMPT,
        result_key="assessment",
        model=GeminiModel.FLASH,
        generation_config=_config(0.3, 2000, top_k=20, top_p=0.85),
    ),
    InsightTool(
        slug="career-transition-calculator",
        label="Career transition analysis",
        request_model=CareerTransitionRequest,
        required=("current_role", "target_role", "years_experience"),
        missing_message="Missing required fields: currentRole, targetRole, yearsExperience",
        prompt=_CAREER_TRANSITION_PROMPT,
        result_key="analysis",
        generation_config=_config(0.6, 4500),
    ),
    InsightTool(
        slug="certification-roi-calculator",
        label="Certification ROI calculation",
        request_model=CertificationROIRequest,
        required=("certification_name", "current_role", "industry", "years_experience", "current_salary", "location"),
        missing_message=(
            "Missing required fields: certificationName, currentRole, industry, "
            "yearsExperience, currentSalary, location"
        ),
        prompt=_CERTIFICATION_ROI_PROMPT,
        result_key="data",
        generation_config=_config(0.7, 2048, top_k=40, top_p=0.95),
    ),
    InsightTool(
        slug="cost-of-living-calculator",
        label="Cost of living comparison",
        request_model=CostOfLivingRequest,
        required=("current_location", "target_locations", "household_size"),
        missing_message="Missing required fields: currentLocation, targetLocations, householdSize",
        prompt=_COST_OF_LIVING_PROMPT,
        result_key="analysis",
        generation_config=_config(0.5, 4000),
    ),
    InsightTool(
        slug="freelance-rate-calculator",
        label="Freelance rate calculation",
        request_model=FreelanceRateRequest,
        required=("work_type", "experience_level", "location"),
        missing_message="Missing required fields: workType, experienceLevel, location",
        prompt=_FREELANCE_RATE_PROMPT,
        result_key="strategy",
        model=GeminiModel.FLASH,
        generation_config=_config(0.3, 2500, top_k=20, top_p=0.85),
    ),
    InsightTool(
        slug="global-opportunity-heatmap",
        label="Global opportunity analysis",
        request_model=GlobalOpportunityRequest,
        required=("job_title",),
        missing_message="Job title is required and must be a string",
        prompt=_HEATMAP_PROMPT,
        result_key="analysis",
        model=GeminiModel.FLASH,
        generation_config=_config(0.5, 4096, top_k=40, top_p=0.95),
        invalid_message="Invalid response format from AI service",
        prepare=_heatmap_inputs,
        finish=_check_heatmap,
    ),
    InsightTool(
        slug="global-relocation-affordability",
        label="Relocation affordability analysis",
        request_model=RelocationAffordabilityRequest,
        required=("from_country", "to_country", "to_city", "household_size"),
        missing_message="Missing required fields: fromCountry, toCountry, toCity, householdSize",
        prompt=_RELOCATION_PROMPT,
        result_key="analysis",
        generation_config=_config(0.7, 4000),
    ),
    InsightTool(
        slug="job-demand-supply",
        label="Job demand analysis",
        request_model=JobDemandSupplyRequest,
        required=("job_title", "location", "industry", "experience_level"),
        missing_message="Missing required fields",
        prompt=_JOB_DEMAND_PROMPT,
        result_key="analysis",
        model=GeminiModel.FLASH,
        generation_config=_config(0.3, 2000, top_k=20, top_p=0.85),
    ),
    InsightTool(
        slug="leadership-readiness-score",
        label="Leadership readiness assessment",
        request_model=LeadershipReadinessRequest,
        required=("current_role", "target_role", "industry"),
        missing_message="Missing required fields",
        prompt=_LEADERSHIP_PROMPT,
        result_key="assessment",
        generation_config=_config(0.3, 1500, top_k=20, top_p=0.85),
        finish=_leadership_extras,
    ),
    InsightTool(
        slug="lifetime-earning-calculator",
        label="Lifetime earnings projection",
        request_model=LifetimeEarningRequest,
        required=("current_role", "industry"),
        missing_message="Missing required fields",
        prompt=_LIFETIME_EARNING_PROMPT,
        result_key="assessment",
        model=GeminiModel.FLASH,
        generation_config=_config(0.3, 2000, top_k=20, top_p=0.85),
    ),
    InsightTool(
        slug="retirement-readiness",
        label="Retirement readiness assessment",
        request_model=RetirementReadinessRequest,
        required=("current_age", "target_retirement_age", "current_country", "current_salary"),
        missing_message="Missing required fields: currentAge, targetRetirementAge, currentCountry, currentSalary",
        prompt=_RETIREMENT_PROMPT,
        result_key="assessment",
        model=GeminiModel.FLASH,
        generation_config=_config(0.3, 4096),
    ),
    InsightTool(
        slug="study-abroad-roi",
        label="Study abroad ROI calculation",
        request_model=StudyAbroadRequest,
        required=("country", "degree_level", "field_of_study", "tuition_annual"),
        missing_message="Missing required fields",
        prompt=_STUDY_ABROAD_PROMPT,
        result_key="roiCalculation",
        generation_config=_config(0.3, 2000, top_k=20, top_p=0.85),
        prepare=_study_abroad_costs,
        finish=_merge_study_abroad,
    ),
    InsightTool(
        slug="work-abroad-savings",
        label="Work abroad savings calculation",
        request_model=WorkAbroadSavingsRequest,
        required=("home_country", "target_country", "offered_salary", "contract_duration"),
        missing_message="Missing required fields: homeCountry, targetCountry, offeredSalary, contractDuration",
        prompt=_WORK_ABROAD_PROMPT,
        result_key="data",
        generation_config=_config(0.7, 2048, top_k=40, top_p=0.95),
    ),
    InsightTool(
        slug="work-happiness-index",
        label="Work happiness analysis",
        request_model=WorkHappinessRequest,
        required=("ratings", "importance_weights"),
        missing_message="Missing required fields: ratings, importanceWeights",
        prompt=_WORK_HAPPINESS_PROMPT,
        result_key="analysis",
        generation_config=_config(0.7, 4000),
    ),
    InsightTool(
        slug="work-life-balance-index",
        label="Work-life balance assessment",
        request_model=WorkLifeBalanceRequest,
        required=("work_schedule", "after_hours_email", "weekend_work_frequency"),
        missing_message="Missing required fields",
        prompt=_WORK_LIFE_BALANCE_PROMPT,
        result_key="assessment",
        model=GeminiModel.FLASH,
        generation_config=_config(0.3, 1800, top_k=20, top_p=0.85),
    ),
)

TOOLS_BY_SLUG: dict[str, InsightTool] = {tool.slug: tool for tool in INSIGHT_TOOLS}


# ── Execution ─────────────────────────────────────────────────────────────────

async def run_insight_tool(tool: InsightTool, request: Request, payload: BaseModel, limit: RateLimitResult):
    if any(is_blank(getattr(payload, name)) for name in tool.required):
        raise ValidationFailed(tool.missing_message)

    extra = tool.prepare(payload) if tool.prepare else {}
    # Templates may name any form field directly; hook fields override them.
    fields = {name: render_value(getattr(payload, name)) for name in type(payload).model_fields}
    fields.update(extra, inputs=render_inputs(payload), json_only=_JSON_ONLY)
    prompt = tool.prompt.format(**fields)

    raw = await gemini_client.generate(
        prompt,
        model=tool.model,
        response_key=tool.response_key,
        generation_config=tool.generation_config,
    )
    result = parse_json_object(raw)
    if result is None:
        logger.error("%s reply was not valid JSON: %.200s", tool.slug, raw)
        raise UpstreamAPIError(tool.invalid_message)

    if tool.finish:
        result = tool.finish(payload, result, extra)
    return tool_response(request, {tool.result_key: result}, limit)


def _register(tool: InsightTool) -> None:
    async def tool_preflight(request: Request):
        return preflight(request)

    async def tool_endpoint(
        request: Request,
        payload: tool.request_model,
        limit: RateLimitResult = Depends(tool_guard(tool.slug, tool.label)),
    ):
        return await run_insight_tool(tool, request, payload, limit)

    name = tool.response_key
    router.add_api_route(
        tool.path, tool_preflight, methods=["OPTIONS"], include_in_schema=False, name=f"{name}_preflight"
    )
    router.add_api_route(tool.path, tool_endpoint, methods=["POST"], name=name, summary=tool.label)


for _tool in INSIGHT_TOOLS:
    _register(_tool)
