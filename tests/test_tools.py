"""
test_tools.py — End-to-end tests for the AI career-tool routes.

Every request goes through the real app: Request Gate, tiered limiter,
body validation, the Gemini client in mock mode, and the error handlers.
Each test uses its own X-Forwarded-For address so counters never collide.
"""

from unittest.mock import AsyncMock, patch

import pytest
from pydantic.alias_generators import to_camel

from careertools.ai.gemini_client import QUOTA_MESSAGE, gemini_client
from careertools.core.errors import ConfigError, UpstreamQuotaExceeded
from careertools.routes.insights import INSIGHT_TOOLS, TOOLS_BY_SLUG

JOB_DESCRIPTION = (
    "We are hiring a backend engineer to design and build Python services on AWS. "
    "You will mentor junior developers and communicate with product stakeholders."
)

RESUME = (
    "Software engineer with six years of experience building data pipelines in Python "
    "and SQL. Led a team of three, migrated reporting to PostgreSQL, cut latency by 40%, "
    "and mentored two junior developers. Contact: jane@example.com"
)


# ══ Preflight and headers ══════════════════════════════════════════════════════

class TestPreflight:
    @pytest.mark.parametrize(
        "path",
        [
            "/api/keyword-extract",
            "/api/cover-letter-generate",
            "/api/resume-gap-analysis",
            "/api/skill-gap-analyzer",
            "/api/linkedin-profile-generate",
            *[tool.path for tool in INSIGHT_TOOLS],
        ],
    )
    async def test_options_returns_cors_headers(self, client, browser, path):
        r = await client.options(path, headers=browser())
        assert r.status_code == 200
        assert r.content == b""
        assert r.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert r.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"
        assert r.headers["access-control-max-age"] == "86400"

    async def test_every_response_has_csp_and_nosniff(self, client):
        r = await client.get("/health")
        assert "default-src 'self'" in r.headers["content-security-policy"]
        assert r.headers["x-content-type-options"] == "nosniff"


# ══ Keyword extraction ═════════════════════════════════════════════════════════

class TestKeywordExtract:
    async def test_success(self, client, browser):
        r = await client.post(
            "/api/keyword-extract",
            json={"jobDescription": JOB_DESCRIPTION},
            headers=browser("198.51.100.21"),
        )
        assert r.status_code == 200
        data = r.json()
        assert data["success"] is True
        assert set(data["keywords"]) == {"actionVerbs", "technicalSkills", "softSkills"}
        assert "Python" in data["keywords"]["technicalSkills"]
        assert data["inputLength"] == len(JOB_DESCRIPTION)
        assert isinstance(data["processingTime"], int)
        assert r.headers["x-ratelimit-remaining"] == "1"
        assert "x-processing-time" in r.headers
        assert r.headers["access-control-allow-origin"] == "http://localhost:3000"

    async def test_unparseable_reply_uses_fallback(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value="no json here")):
            r = await client.post(
                "/api/keyword-extract",
                json={"jobDescription": JOB_DESCRIPTION},
                headers=browser("198.51.100.22"),
            )
        assert r.status_code == 200
        assert r.json()["keywords"]["actionVerbs"][0] == "Developed"

    async def test_missing_categories_become_empty_lists(self, client, browser):
        reply = '{"technicalSkills": ["Go"], "softSkills": "not a list"}'
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value=reply)):
            r = await client.post(
                "/api/keyword-extract",
                json={"jobDescription": JOB_DESCRIPTION},
                headers=browser("198.51.100.23"),
            )
        assert r.json()["keywords"] == {"actionVerbs": [], "technicalSkills": ["Go"], "softSkills": []}

    async def test_too_short_after_cleaning(self, client, browser):
        r = await client.post(
            "/api/keyword-extract",
            json={"jobDescription": "!!! ??? <> dev"},
            headers=browser("198.51.100.24"),
        )
        assert r.status_code == 400
        data = r.json()
        assert data["type"] == "VALIDATION_ERROR"
        assert data["error"] == "Keyword extraction failed"
        assert data["message"] == "Job description must be at least 10 characters long"
        assert "processingTime" in data

    async def test_too_long(self, client, browser):
        r = await client.post(
            "/api/keyword-extract",
            json={"jobDescription": "a" * 4001},
            headers=browser("198.51.100.25"),
        )
        assert r.status_code == 400
        assert r.json()["message"] == "Job description must be less than 4000 characters"

    async def test_missing_field(self, client, browser):
        r = await client.post("/api/keyword-extract", json={}, headers=browser("198.51.100.26"))
        assert r.status_code == 400
        data = r.json()
        assert data["type"] == "VALIDATION_ERROR"
        assert data["message"] == "jobDescription is required"
        assert r.headers["access-control-allow-origin"] == "http://localhost:3000"


# ══ Cover letter ═══════════════════════════════════════════════════════════════

class TestCoverLetter:
    async def test_success_strips_markdown(self, client, browser):
        r = await client.post(
            "/api/cover-letter-generate",
            json={"resume": RESUME, "jobDescription": JOB_DESCRIPTION},
            headers=browser("198.51.100.31"),
        )
        assert r.status_code == 200
        data = r.json()
        assert "**" not in data["coverLetter"]
        assert data["wordCount"] == len(data["coverLetter"].split())
        assert r.headers["x-ratelimit-remaining"] == "0"

    async def test_resume_word_limit(self, client, browser):
        r = await client.post(
            "/api/cover-letter-generate",
            json={"resume": "word " * 2501, "jobDescription": JOB_DESCRIPTION},
            headers=browser("198.51.100.32"),
        )
        assert r.status_code == 400
        assert r.json()["message"] == "Resume exceeds 2500 word limit (current: 2501 words)"

    async def test_short_resume(self, client, browser):
        r = await client.post(
            "/api/cover-letter-generate",
            json={"resume": "Too short", "jobDescription": JOB_DESCRIPTION},
            headers=browser("198.51.100.33"),
        )
        assert r.status_code == 400
        assert r.json()["error"] == "Cover letter generation failed"

    async def test_second_request_hits_burst_tier(self, client, browser):
        body = {"resume": RESUME, "jobDescription": JOB_DESCRIPTION}
        first = await client.post("/api/cover-letter-generate", json=body, headers=browser("198.51.100.34"))
        assert first.status_code == 200

        r = await client.post("/api/cover-letter-generate", json=body, headers=browser("198.51.100.34"))

        assert r.status_code == 429
        data = r.json()
        assert data["error"] == "RATE_LIMIT_EXCEEDED"
        assert data["tier"] == "burst"
        assert data["retryAfter"] >= 1
        assert data["message"].startswith("Rate limit exceeded for burst tier.")
        assert isinstance(data["processingTime"], int)
        assert r.headers["x-ratelimit-limit"] == "3"
        assert r.headers["x-ratelimit-remaining"] == "0"
        assert r.headers["retry-after"] == str(data["retryAfter"])
        assert r.headers["x-ratelimit-reset"] == data["resetTime"]


# ══ Resume gap analysis ════════════════════════════════════════════════════════

class TestResumeGap:
    async def test_success(self, client, browser):
        r = await client.post(
            "/api/resume-gap-analysis",
            json={"resume": RESUME, "targetRole": "Engineering Manager"},
            headers=browser("198.51.100.41"),
        )
        assert r.status_code == 200
        analysis = r.json()["analysis"]
        assert analysis["overallScore"] == 68
        assert isinstance(analysis["missingSkills"], list)

    async def test_incomplete_analysis_is_api_error(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value='{"summary": "ok"}')):
            r = await client.post(
                "/api/resume-gap-analysis",
                json={"resume": RESUME, "targetRole": "Engineering Manager"},
                headers=browser("198.51.100.42"),
            )
        assert r.status_code == 500
        data = r.json()
        assert data["type"] == "API_ERROR"
        assert data["message"] == "Incomplete analysis from AI service"
        assert data["error"] == "Gap analysis failed"

    async def test_invalid_json_is_api_error(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value="Sorry, I can't help.")):
            r = await client.post(
                "/api/resume-gap-analysis",
                json={"resume": RESUME, "targetRole": "Engineering Manager"},
                headers=browser("198.51.100.43"),
            )
        assert r.status_code == 500
        assert r.json()["message"] == "Invalid response format from AI service"

    async def test_short_target_role(self, client, browser):
        r = await client.post(
            "/api/resume-gap-analysis",
            json={"resume": RESUME, "targetRole": "CTO"},
            headers=browser("198.51.100.44"),
        )
        assert r.status_code == 400
        assert r.json()["message"] == "Target role must be at least 5 characters long"


# ══ Skill gap analyzer ═════════════════════════════════════════════════════════

SKILL_GAP_BODY = {
    "currentRole": "Backend Developer",
    "yearsExperience": 4,
    "currentSkills": ["Python", "SQL"],
    "targetRole": "Platform Engineer",
    "industry": "Fintech",
    "country": "United Kingdom",
}


class TestSkillGap:
    async def test_resources_attached_to_every_gap(self, client, browser):
        r = await client.post("/api/skill-gap-analyzer", json=SKILL_GAP_BODY, headers=browser("198.51.100.51"))
        assert r.status_code == 200
        analysis = r.json()["analysis"]

        critical = analysis["criticalGaps"][0]["learningResources"]
        important = analysis["importantGaps"][0]["learningResources"]
        nice = analysis["niceToHaveGaps"][0]["learningResources"]

        assert critical[0]["name"] == "Kubernetes for Beginners"
        assert important[0]["name"] == "JavaScript: The Complete Guide"
        assert [res["name"] for res in nice] == ["Search on Udemy", "Search on Coursera", "YouTube Tutorials"]
        assert "learningResources" not in analysis["skillsYouHave"][0]

    async def test_missing_required_field(self, client, browser):
        body = {k: v for k, v in SKILL_GAP_BODY.items() if k != "country"}
        r = await client.post("/api/skill-gap-analyzer", json=body, headers=browser("198.51.100.52"))
        assert r.status_code == 400
        assert r.json()["message"] == "country is required"

    async def test_blank_required_field(self, client, browser):
        r = await client.post(
            "/api/skill-gap-analyzer",
            json={**SKILL_GAP_BODY, "industry": "   "},
            headers=browser("198.51.100.53"),
        )
        assert r.status_code == 400
        assert r.json()["message"] == "Missing required fields"

    async def test_uses_flash_lite(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value="{}")) as generate:
            r = await client.post("/api/skill-gap-analyzer", json=SKILL_GAP_BODY, headers=browser("198.51.100.54"))
        assert r.status_code == 200
        assert generate.await_args.kwargs["model"].value == "gemini-2.5-flash-lite"
        assert "Python, SQL" in generate.await_args.args[0]


# ══ Upstream failures ══════════════════════════════════════════════════════════

class TestUpstreamErrors:
    async def test_missing_api_key_is_503(self, client, browser):
        with patch.object(
            gemini_client, "generate", new=AsyncMock(side_effect=ConfigError("Service configuration error"))
        ):
            r = await client.post(
                "/api/keyword-extract",
                json={"jobDescription": JOB_DESCRIPTION},
                headers=browser("198.51.100.61"),
            )
        assert r.status_code == 503
        assert r.json()["type"] == "CONFIG_ERROR"

    async def test_provider_quota_is_429_with_guidance(self, client, browser):
        quota = UpstreamQuotaExceeded(QUOTA_MESSAGE, retry_after=60)
        with patch.object(gemini_client, "generate", new=AsyncMock(side_effect=quota)):
            r = await client.post(
                "/api/keyword-extract",
                json={"jobDescription": JOB_DESCRIPTION},
                headers=browser("198.51.100.62"),
            )
        assert r.status_code == 429
        data = r.json()
        assert data["type"] == "RATE_LIMIT_EXCEEDED"
        assert "try again" in data["message"]
        assert r.headers["retry-after"] == "60"

    async def test_unexpected_error_is_500_unknown(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(side_effect=RuntimeError("boom"))):
            r = await client.post(
                "/api/keyword-extract",
                json={"jobDescription": JOB_DESCRIPTION},
                headers=browser("198.51.100.63"),
            )
        assert r.status_code == 500
        data = r.json()
        assert data["type"] == "UNKNOWN_ERROR"
        assert data["error"] == "Keyword extraction failed"
        assert "boom" not in data["message"]


# ══ Request Gate in front of the tools ═════════════════════════════════════════

class TestGateIntegration:
    async def test_disallowed_origin_is_403(self, client, browser):
        r = await client.post(
            "/api/keyword-extract",
            json={"jobDescription": JOB_DESCRIPTION},
            headers=browser("198.51.100.71", Origin="https://evil.example"),
        )
        assert r.status_code == 403
        data = r.json()
        assert data["error"] == "Security violation"
        assert data["message"] == "Security violation detected"
        assert set(data) == {"error", "message", "timestamp"}
        assert r.headers["x-frame-options"] == "DENY"
        assert r.headers["vary"] == "Origin"

    async def test_gate_runs_before_body_validation(self, client, browser):
        r = await client.post(
            "/api/keyword-extract",
            json={},
            headers=browser("198.51.100.72", Origin="https://evil.example"),
        )
        assert r.status_code == 403

    async def test_scripted_client_is_403(self, client, browser):
        r = await client.post(
            "/api/keyword-extract",
            json={"jobDescription": JOB_DESCRIPTION},
            headers={**browser("198.51.100.73"), "User-Agent": "python-requests/2.32.3"},
        )
        assert r.status_code == 403

    async def test_blocked_address_is_denied(self, client, browser):
        from careertools.security.gate import request_gate
        from careertools.security.violations import utcnow

        await request_gate.store.block("198.51.100.74", utcnow())

        r = await client.post(
            "/api/keyword-extract",
            json={"jobDescription": JOB_DESCRIPTION},
            headers=browser("198.51.100.74"),
        )
        assert r.status_code == 403
        assert r.json()["message"] == "Access denied"

    async def test_missing_provenance_is_advisory(self, client, browser):
        headers = browser("198.51.100.75")
        del headers["Origin"]
        r = await client.post(
            "/api/keyword-extract", json={"jobDescription": JOB_DESCRIPTION}, headers=headers
        )
        assert r.status_code == 200


# ══ Insight tools ══════════════════════════════════════════════════════════════

INSIGHT_BODIES = {
    "salary-analyzer": {
        "country": "United Kingdom", "jobTitle": "Data Engineer", "industry": "Fintech", "yearsExperience": 5,
    },
    "salary-comparison": {
        "scenarios": [
            {"location": "London", "jobTitle": "Data Engineer", "baseSalary": 70000},
            {"location": "Berlin", "jobTitle": "Data Engineer", "baseSalary": 65000},
        ],
    },
    "career-roadmap-generator": {
        "currentRole": "Data Analyst", "targetRole": "Data Engineer",
        "currentIndustry": "Retail", "country": "United Kingdom",
    },
    "next-job-recommender": {"currentRole": "Backend Engineer", "industry": "Fintech", "yearsExperience": 6},
    "automation-risk": {"jobTitle": "Accounts Payable Clerk", "industry": "Finance"},
    "ai-skills-readiness": {"currentRole": "Marketing Manager", "industry": "Retail", "experienceLevel": "Mid"},
    "future-skills-identifier": {"currentRole": "QA Engineer", "industry": "Software", "yearsExperience": 4},
    "career-strength-index": {"currentRole": "Product Manager", "industry": "SaaS", "education": "Bachelor's"},
    "career-transition-calculator": {"currentRole": "Secondary School Educator", "targetRole": "UX Designer", "yearsExperience": 8},
    "certification-roi-calculator": {
        "certificationName": "AWS Solutions Architect Associate", "currentRole": "Backend Engineer",
        "industry": "Fintech", "yearsExperience": 5, "currentSalary": 65000, "location": "London",
    },
    "cost-of-living-calculator": {
        "currentLocation": "London", "targetLocations": ["Berlin", "Lisbon"], "householdSize": 2,
    },
    "freelance-rate-calculator": {"workType": "Web development", "experienceLevel": "Senior", "location": "UK"},
    "global-opportunity-heatmap": {"jobTitle": "Data Engineer", "yearsOfExperience": 5, "skills": ["Python", "Spark"]},
    "global-relocation-affordability": {
        "fromCountry": "India", "toCountry": "Germany", "toCity": "Berlin", "householdSize": 3,
    },
    "job-demand-supply": {
        "jobTitle": "Data Engineer", "location": "London", "industry": "Fintech", "experienceLevel": "Senior",
    },
    "leadership-readiness-score": {
        "currentRole": "Senior Engineer", "targetRole": "Engineering Manager", "industry": "SaaS",
        "leadershipSkills": ["Delegation", "Agile Leadership"],
    },
    "lifetime-earning-calculator": {"currentRole": "Nurse", "industry": "Healthcare", "currentAge": 30},
    "retirement-readiness": {
        "currentAge": 40, "targetRetirementAge": 65, "currentCountry": "Canada", "currentSalary": 90000,
    },
    "study-abroad-roi": {
        "country": "Canada", "degreeLevel": "Master's", "fieldOfStudy": "Computer Science", "tuitionAnnual": 20000,
    },
    "work-abroad-savings": {
        "homeCountry": "Philippines", "targetCountry": "UAE", "offeredSalary": 4000, "contractDuration": 24,
    },
    "work-happiness-index": {
        "ratings": {"pay": 7, "growth": 4, "team": 8},
        "importanceWeights": {"pay": 3, "growth": 5, "team": 4},
    },
    "work-life-balance-index": {
        "workSchedule": "9-5", "afterHoursEmail": "Sometimes", "weekendWorkFrequency": "Rarely",
    },
}


def _insight_cases():
    return [
        pytest.param(tool, f"192.0.2.{number}", id=tool.slug)
        for number, tool in enumerate(INSIGHT_TOOLS, start=10)
    ]


class TestInsightTools:
    def test_every_tool_has_a_sample_body(self):
        assert set(INSIGHT_BODIES) == set(TOOLS_BY_SLUG)

    @pytest.mark.parametrize(("tool", "address"), _insight_cases())
    async def test_success(self, client, browser, tool, address):
        r = await client.post(tool.path, json=INSIGHT_BODIES[tool.slug], headers=browser(address))
        assert r.status_code == 200, r.text
        data = r.json()
        assert data["success"] is True
        assert isinstance(data[tool.result_key], dict)
        assert isinstance(data["processingTime"], int)
        assert r.headers["x-ratelimit-remaining"] == "1"
        assert r.headers["access-control-allow-origin"] == "http://localhost:3000"

    @pytest.mark.parametrize(
        ("tool", "address"),
        [case for case in _insight_cases() if case.values[0].required],
    )
    async def test_missing_required_field(self, client, browser, tool, address):
        body = dict(INSIGHT_BODIES[tool.slug])
        del body[to_camel(tool.required[0])]
        r = await client.post(tool.path, json=body, headers=browser(address))
        assert r.status_code == 400
        data = r.json()
        assert data["type"] == "VALIDATION_ERROR"
        assert data["message"] == tool.missing_message
        assert data["error"] == f"{tool.label} failed"

    async def test_zero_is_an_answer(self, client, browser):
        body = {**INSIGHT_BODIES["next-job-recommender"], "yearsExperience": 0}
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value="{}")) as generate:
            r = await client.post("/api/next-job-recommender", json=body, headers=browser("192.0.2.50"))
        assert r.status_code == 200
        assert "- Years Experience: 0\n" in generate.await_args.args[0]

    async def test_blank_string_counts_as_missing(self, client, browser):
        body = {**INSIGHT_BODIES["automation-risk"], "industry": "   "}
        r = await client.post("/api/automation-risk", json=body, headers=browser("192.0.2.51"))
        assert r.status_code == 400
        assert r.json()["message"] == "Missing required fields: jobTitle, industry"

    async def test_model_and_settings_come_from_the_table(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value='{"phases": [{}]}')) as generate:
            r = await client.post(
                "/api/career-roadmap-generator",
                json=INSIGHT_BODIES["career-roadmap-generator"],
                headers=browser("192.0.2.52"),
            )
        assert r.status_code == 200
        kwargs = generate.await_args.kwargs
        assert kwargs["model"].value == "gemini-2.5-flash"
        assert kwargs["generation_config"] == {
            "temperature": 0.4, "max_output_tokens": 4000, "top_k": 30, "top_p": 0.9,
        }
        assert kwargs["response_key"] == "career_roadmap_generator"

    async def test_unparseable_reply_is_api_error(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value="sorry, no")):
            r = await client.post(
                "/api/ai-skills-readiness",
                json=INSIGHT_BODIES["ai-skills-readiness"],
                headers=browser("192.0.2.53"),
            )
        assert r.status_code == 500
        data = r.json()
        assert data["type"] == "API_ERROR"
        assert data["message"] == "Failed to parse AI response"

    async def test_default_budget_applies(self, client, browser):
        headers = browser("192.0.2.54")
        for _ in range(2):
            r = await client.post("/api/automation-risk", json=INSIGHT_BODIES["automation-risk"], headers=headers)
            assert r.status_code == 200
        r = await client.post("/api/automation-risk", json=INSIGHT_BODIES["automation-risk"], headers=headers)
        assert r.status_code == 429
        assert r.json()["tier"] == "burst"
        assert r.headers["x-ratelimit-limit"] == "5"

    async def test_gate_runs_before_body_validation(self, client, browser):
        r = await client.post(
            "/api/salary-analyzer",
            json={"jobTitle": 42},
            headers={**browser("192.0.2.55"), "User-Agent": "curl/8.5"},
        )
        assert r.status_code == 403


class TestSalaryTools:
    async def test_currency_follows_country(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value="{}")) as generate:
            r = await client.post(
                "/api/salary-analyzer", json=INSIGHT_BODIES["salary-analyzer"], headers=browser("192.0.2.60")
            )
        assert r.status_code == 200
        prompt = generate.await_args.args[0]
        assert "all salary amounts in GBP" in prompt
        assert '"currencySymbol": "£"' in prompt

    async def test_unknown_country_is_priced_in_dollars(self, client, browser):
        body = {**INSIGHT_BODIES["salary-analyzer"], "country": "Atlantis"}
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value="{}")) as generate:
            await client.post("/api/salary-analyzer", json=body, headers=browser("192.0.2.61"))
        assert "all salary amounts in USD" in generate.await_args.args[0]

    async def test_comparison_needs_two_scenarios(self, client, browser):
        body = {"scenarios": INSIGHT_BODIES["salary-comparison"]["scenarios"][:1]}
        r = await client.post("/api/salary-comparison", json=body, headers=browser("192.0.2.62"))
        assert r.status_code == 400
        assert r.json()["message"] == "At least 2 scenarios are required for comparison"

    async def test_comparison_lists_each_scenario(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value="{}")) as generate:
            await client.post(
                "/api/salary-comparison", json=INSIGHT_BODIES["salary-comparison"], headers=browser("192.0.2.63")
            )
        prompt = generate.await_args.args[0]
        assert "Scenario 1: location: London, jobTitle: Data Engineer, baseSalary: 70000" in prompt
        assert "Scenario 2: location: Berlin" in prompt


class TestPostChecks:
    async def test_roadmap_without_phases_is_rejected(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value='{"phases": []}')):
            r = await client.post(
                "/api/career-roadmap-generator",
                json=INSIGHT_BODIES["career-roadmap-generator"],
                headers=browser("192.0.2.70"),
            )
        assert r.status_code == 500
        assert r.json()["message"] == "Invalid roadmap structure generated"

    @pytest.mark.parametrize(
        ("change", "message"),
        [
            ({"yearsOfExperience": 51}, "Years of experience must be a number between 0 and 50"),
            ({"yearsOfExperience": None}, "Years of experience must be a number between 0 and 50"),
            ({"skills": []}, "At least one skill is required"),
            ({"skills": [f"skill {n}" for n in range(21)]}, "Maximum 20 skills allowed"),
            ({"jobTitle": ""}, "Job title is required and must be a string"),
        ],
    )
    async def test_heatmap_input_checks(self, client, browser, change, message):
        body = {**INSIGHT_BODIES["global-opportunity-heatmap"], **change}
        r = await client.post("/api/global-opportunity-heatmap", json=body, headers=browser("192.0.2.71"))
        assert r.status_code == 400
        assert r.json()["message"] == message

    async def test_heatmap_defaults_and_truncation(self, client, browser):
        body = {**INSIGHT_BODIES["global-opportunity-heatmap"], "jobTitle": "x" * 150}
        reply = '{"summary": "ok", "topCountries": [{"country": "Germany"}]}'
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value=reply)) as generate:
            r = await client.post("/api/global-opportunity-heatmap", json=body, headers=browser("192.0.2.72"))
        assert r.status_code == 200
        prompt = generate.await_args.args[0]
        assert f"- Job Title: {'x' * 100}\n" in prompt
        assert "- Work Mode: any" in prompt
        assert "- Salary Expectation: market_rate" in prompt
        assert "- Needs Visa Sponsorship: No" in prompt

    async def test_heatmap_incomplete_analysis(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value='{"summary": "ok"}')):
            r = await client.post(
                "/api/global-opportunity-heatmap",
                json=INSIGHT_BODIES["global-opportunity-heatmap"],
                headers=browser("192.0.2.73"),
            )
        assert r.status_code == 500
        assert r.json()["message"] == "Incomplete analysis from AI service"

    async def test_heatmap_unparseable_reply(self, client, browser):
        with patch.object(gemini_client, "generate", new=AsyncMock(return_value="no")):
            r = await client.post(
                "/api/global-opportunity-heatmap",
                json=INSIGHT_BODIES["global-opportunity-heatmap"],
                headers=browser("192.0.2.74"),
            )
        assert r.status_code == 500
        assert r.json()["message"] == "Invalid response format from AI service"


class TestComputedExtras:
    async def test_leadership_gets_static_certifications_and_resources(self, client, browser):
        r = await client.post(
            "/api/leadership-readiness-score",
            json=INSIGHT_BODIES["leadership-readiness-score"],
            headers=browser("192.0.2.80"),
        )
        assert r.status_code == 200
        assessment = r.json()["assessment"]
        assert [c["name"] for c in assessment["recommendedCertifications"]] == [
            "Executive Leadership Certificate",
            "Leadership and Management Certificate",
            "Certified Scrum Master (CSM)",
        ]
        assert assessment["recommendedCertifications"][0]["costRange"] == "$3,000-$6,000"
        assert len(assessment["recommendedResources"]) == 6
        assert assessment["readinessLevel"] == "Ready Soon"

    async def test_study_abroad_merges_costs_with_analysis(self, client, browser):
        body = {
            **INSIGHT_BODIES["study-abroad-roi"],
            "programDuration": 1,
            "livingExpensesMonthly": 1000,
            "scholarships": 4000,
        }
        with patch.object(
            gemini_client, "generate", new=AsyncMock(return_value='{"recommendation": {"verdict": "Recommended"}}')
        ) as generate:
            r = await client.post("/api/study-abroad-roi", json=body, headers=browser("192.0.2.81"))
        assert r.status_code == 200
        roi = r.json()["roiCalculation"]
        direct = roi["investmentBreakdown"]["directCosts"]
        assert direct["tuition"] == 20000
        assert direct["livingExpenses"] == 12000
        assert direct["subtotal"] == 34000
        assert roi["funding"]["totalFunding"] == 4000
        assert roi["netInvestment"] == 30000
        assert roi["loanDetails"]["monthlyPayment"] == 0
        assert roi["recommendation"] == {"verdict": "Recommended"}
        prompt = generate.await_args.args[0]
        assert "- Total Net Investment: $30000" in prompt
        assert "- Degree: Master's in Computer Science" in prompt


# ══ LinkedIn profile ═══════════════════════════════════════════════════════════

PDF_TYPE = "application/pdf"
LINKEDIN_FORM = {
    "targetIndustry": "Fintech",
    "careerStage": "Mid-level",
    "primaryGoal": "Job search",
    "tonePreference": "confident",
}
EXTRACT = "careertools.routes.linkedin_profile.extract_resume_text"


class TestLinkedInProfile:
    async def test_success(self, client, browser):
        with patch(EXTRACT, return_value=RESUME) as extract:
            r = await client.post(
                "/api/linkedin-profile-generate",
                data=LINKEDIN_FORM,
                files={"resume": ("cv.pdf", b"%PDF-1.4 resume", PDF_TYPE)},
                headers=browser("192.0.2.90"),
            )
        assert r.status_code == 200, r.text
        content = r.json()["content"]
        assert content["headlines"][0].startswith("[MOCK]")
        assert set(content) >= {"headlines", "aboutSections", "experienceDescriptions", "skills", "featuredIdeas"}
        extract.assert_called_once_with(b"%PDF-1.4 resume", PDF_TYPE)

    async def test_resume_is_required(self, client, browser):
        r = await client.post("/api/linkedin-profile-generate", data=LINKEDIN_FORM, headers=browser("192.0.2.91"))
        assert r.status_code == 400
        assert r.json()["message"] == "Resume file is required"

    async def test_targeting_fields_are_required(self, client, browser):
        r = await client.post(
            "/api/linkedin-profile-generate",
            data={**LINKEDIN_FORM, "careerStage": ""},
            files={"resume": ("cv.pdf", b"%PDF", PDF_TYPE)},
            headers=browser("192.0.2.92"),
        )
        assert r.status_code == 400
        assert r.json()["message"] == "Target industry, career stage, and primary goal are required"

    async def test_only_pdf_and_docx(self, client, browser):
        r = await client.post(
            "/api/linkedin-profile-generate",
            data=LINKEDIN_FORM,
            files={"resume": ("cv.txt", b"plain text resume", "text/plain")},
            headers=browser("192.0.2.93"),
        )
        assert r.status_code == 400
        assert r.json()["message"] == "Only PDF and DOCX files are supported"

    async def test_unreadable_resume(self, client, browser):
        with patch(EXTRACT, return_value="too short"):
            r = await client.post(
                "/api/linkedin-profile-generate",
                data=LINKEDIN_FORM,
                files={"resume": ("cv.pdf", b"%PDF", PDF_TYPE)},
                headers=browser("192.0.2.94"),
            )
        assert r.status_code == 400
        assert r.json()["message"].startswith("Could not extract sufficient text from resume")

    async def test_resume_text_is_capped(self, client, browser):
        with (
            patch(EXTRACT, return_value="word " * 4000),
            patch.object(gemini_client, "generate", new=AsyncMock(return_value="{}")) as generate,
        ):
            await client.post(
                "/api/linkedin-profile-generate",
                data=LINKEDIN_FORM,
                files={"resume": ("cv.pdf", b"%PDF", PDF_TYPE)},
                headers=browser("192.0.2.95"),
            )
        prompt = generate.await_args.args[0]
        assert ("word " * 1600) in prompt
        assert ("word " * 1601) not in prompt

    async def test_unparseable_reply_uses_fallback(self, client, browser):
        with (
            patch(EXTRACT, return_value=RESUME),
            patch.object(gemini_client, "generate", new=AsyncMock(return_value="no json")),
        ):
            r = await client.post(
                "/api/linkedin-profile-generate",
                data=LINKEDIN_FORM,
                files={"resume": ("cv.pdf", b"%PDF", PDF_TYPE)},
                headers=browser("192.0.2.96"),
            )
        assert r.status_code == 200
        content = r.json()["content"]
        assert content["headlines"][0] == "Fintech Professional | Mid-level | Driving Innovation & Growth"
        assert content["skills"]["core"][0] == "Leadership"

    async def test_large_upload_is_not_flagged_by_the_gate(self, client, browser):
        from careertools.security.gate import request_gate

        with patch(EXTRACT, return_value=RESUME):
            r = await client.post(
                "/api/linkedin-profile-generate",
                data=LINKEDIN_FORM,
                files={"resume": ("cv.pdf", b"%PDF" + b"0" * 200_000, PDF_TYPE)},
                headers=browser("192.0.2.97"),
            )
        assert r.status_code == 200
        metrics = await request_gate.security_metrics()
        assert metrics["totalViolations24h"] == 0

    async def test_file_over_five_megabytes(self, client, browser):
        r = await client.post(
            "/api/linkedin-profile-generate",
            data=LINKEDIN_FORM,
            files={"resume": ("cv.pdf", b"0" * (5 * 1024 * 1024 + 1), PDF_TYPE)},
            headers=browser("192.0.2.98"),
        )
        assert r.status_code == 400
        assert r.json()["message"] == "File size must be less than 5MB"
