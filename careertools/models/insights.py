"""
insights.py — Request models for the table-driven insight tools.

Required fields are declared Optional here: each tool checks its own
required set after parsing, so a form that leaves a field blank gets the
tool's "Missing required fields" message instead of a per-field error.
Numeric answers accept strings as well because several forms send ranges
("3-5", "10+").
"""

from typing import Optional, Union

from pydantic import Field

from careertools.models.tools import CamelModel

Answer = Optional[Union[float, str]]
Items = Optional[Union[list[str], str]]
Flag = Optional[Union[bool, str]]


# ── Salary ────────────────────────────────────────────────────────────────────

class SalaryAnalyzerRequest(CamelModel):
    country:          Optional[str] = None
    job_title:        Optional[str] = None
    industry:         Optional[str] = None
    years_experience: Answer = None
    city:             Optional[str] = None
    company_size:     Optional[str] = None
    education:        Optional[str] = None
    skills:           Items = None
    work_mode:        Optional[str] = None


class SalaryScenario(CamelModel):
    location:          Optional[str] = None
    job_title:         Optional[str] = None
    experience_years:  Answer = None
    industry:          Optional[str] = None
    company_size:      Optional[str] = None
    work_arrangement:  Optional[str] = None
    base_salary:       Answer = None
    bonuses:           Answer = None
    equity:            Answer = None
    benefits:          Items = None


class SalaryComparisonRequest(CamelModel):
    scenarios: list[SalaryScenario] = Field(default_factory=list)


class FreelanceRateRequest(CamelModel):
    work_type:          Optional[str] = None
    experience_level:   Optional[str] = None
    location:           Optional[str] = None
    specialization:     Items = Field(default_factory=list)
    portfolio_projects: Answer = 0
    weekly_hours:       Answer = 40
    desired_income:     Answer = 0
    expenses:           Answer = 0


class CertificationROIRequest(CamelModel):
    certification_name:   Optional[str] = None
    current_role:         Optional[str] = None
    industry:             Optional[str] = None
    years_experience:     Answer = None
    current_salary:       Answer = None
    location:             Optional[str] = None
    course_cost:          Answer = None
    exam_fee:             Answer = None
    study_materials_cost: Answer = None
    time_investment:      Answer = None
    renewal_cost:         Answer = None
    primary_reason:       Optional[str] = None


class LifetimeEarningRequest(CamelModel):
    current_age:         Answer = None
    current_salary:      Answer = None
    current_role:        Optional[str] = None
    industry:            Optional[str] = None
    retirement_age:      Answer = None
    annual_raise:        Answer = None
    promotion_frequency: Optional[str] = None
    career_breaks:       Optional[str] = None
    education_plans:     Optional[str] = None
    geographic_move:     Optional[str] = None


class RetirementReadinessRequest(CamelModel):
    current_age:             Answer = None
    target_retirement_age:   Answer = None
    current_country:         Optional[str] = None
    life_expectancy:         Answer = None
    current_savings:         Answer = None
    monthly_contributions:   Answer = None
    personal_contribution:   Answer = None
    employer_contribution:   Answer = None
    annual_return:           Answer = None
    current_salary:          Answer = None
    desired_lifestyle:       Optional[str] = None
    retirement_location:     Optional[str] = None
    healthcare_costs:        Answer = None
    pension_years:           Answer = None
    expected_social_security: Answer = None


# ── Career direction ──────────────────────────────────────────────────────────

class CareerRoadmapRequest(CamelModel):
    current_role:        Optional[str] = None
    current_industry:    Optional[str] = None
    current_experience:  Answer = None
    total_experience:    Answer = None
    target_role:         Optional[str] = None
    target_industry:     Optional[str] = None
    country:             Optional[str] = None
    current_skills:      Items = None
    education_level:     Optional[str] = None
    willing_to_study:    Flag = None
    timeline_goal:       Optional[str] = None
    budget_constraints:  Optional[str] = None
    time_availability:   Optional[str] = None
    geographic_mobility: Optional[str] = None
    interests:           Items = None


class NextJobRequest(CamelModel):
    current_role:             Optional[str] = None
    company_size:             Optional[str] = None
    industry:                 Optional[str] = None
    years_experience:         Answer = None
    years_in_current_role:    Answer = None
    skills:                   Items = None
    education:                Optional[str] = None
    achievements:             Optional[str] = None
    industries_of_interest:   Items = None
    work_style:               Optional[str] = None
    company_size_preference:  Optional[str] = None
    location:                 Optional[str] = None
    min_salary:               Answer = None
    target_salary:            Answer = None
    career_direction:         Optional[str] = None
    timeline:                 Optional[str] = None
    risk_tolerance:           Optional[str] = None
    priorities:               Items = None


class CareerTransitionRequest(CamelModel):
    current_role:          Optional[str] = None
    current_industry:      Optional[str] = None
    years_experience:      Answer = None
    current_skills:        Items = None
    current_salary:        Answer = None
    job_satisfaction:      Answer = None
    target_role:           Optional[str] = None
    target_industry:       Optional[str] = None
    reason_for_change:     Optional[str] = None
    urgency:               Optional[str] = None
    financial_runway:      Answer = None
    risk_tolerance:        Optional[str] = None
    dependents:            Answer = None
    time_available:        Optional[str] = None
    geographic_flexibility: Optional[str] = None
    willing_to_take_pay_cut: Flag = None


class CareerStrengthRequest(CamelModel):
    current_role:                Optional[str] = None
    industry:                    Optional[str] = None
    years_experience:            Answer = None
    education:                   Optional[str] = None
    certifications:              Items = None
    skills:                      Items = None
    major_achievements:          Optional[str] = None
    linked_in_connections:       Answer = Field(None, title="LinkedIn Connections")
    network_quality:             Optional[str] = None
    publications_speeches:       Answer = None
    portfolio_quality:           Optional[str] = None
    management_experience:       Answer = None
    job_changes_last5_years:     Answer = Field(None, title="Job Changes (last 5 years)")
    salary_growth_yo_y:          Answer = Field(None, title="Salary Growth YoY")
    recruiter_contacts_per_month: Answer = None
    application_response_rate:   Answer = None


class LeadershipReadinessRequest(CamelModel):
    years_experience:  Answer = None
    current_role:      Optional[str] = None
    team_size:         Answer = None
    leadership_skills: list[str] = Field(default_factory=list)
    soft_skills:       Items = None
    achievements:      Optional[str] = None
    target_role:       Optional[str] = None
    industry:          Optional[str] = None


# ── Skills and the future of work ─────────────────────────────────────────────

class AutomationRiskRequest(CamelModel):
    job_title:             Optional[str] = None
    industry:              Optional[str] = None
    primary_tasks:         Items = None
    repetitiveness:        Answer = None
    creativity_required:   Answer = None
    human_interaction:     Answer = None
    problem_complexity:    Answer = None
    physical_presence:     Answer = None
    decision_making_level: Answer = None
    technical_skills:      Items = None
    soft_skills:           Items = None
    digital_literacy:      Answer = None


class AISkillsReadinessRequest(CamelModel):
    current_role:           Optional[str] = None
    industry:               Optional[str] = None
    experience_level:       Optional[str] = None
    has_used_generative_ai: Flag = Field(None, alias="hasUsedGenerativeAI", title="Has Used Generative AI")
    uses_ai_in_work:        Flag = Field(None, alias="usesAIInWork", title="Uses AI In Work")
    ai_tools_used:          Items = Field(None, alias="aiToolsUsed", title="AI Tools Used")
    comfort_level:          Answer = None
    ai_training_completed:  Flag = Field(None, alias="aiTrainingCompleted", title="AI Training Completed")
    current_ai_use_cases:   Items = Field(None, alias="currentAIUseCases", title="Current AI Use Cases")


class FutureSkillsRequest(CamelModel):
    current_role:     Optional[str] = None
    industry:         Optional[str] = None
    years_experience: Answer = None
    current_skills:   Items = None
    career_goals:     Optional[str] = None
    time_horizon:     Optional[str] = "3 years"


class JobDemandSupplyRequest(CamelModel):
    job_title:               Optional[str] = None
    location:                Optional[str] = None
    industry:                Optional[str] = None
    experience_level:        Optional[str] = None
    skills:                  Items = None
    education:               Optional[str] = None
    certifications:          Items = None
    company_size_preference: Optional[str] = None
    salary_expectations:     Answer = None


# ── Relocation and abroad ─────────────────────────────────────────────────────

class CostOfLivingRequest(CamelModel):
    current_location:    Optional[str] = None
    target_locations:    Items = None
    household_size:      Answer = None
    lifestyle_level:     Optional[str] = None
    housing_type:        Optional[str] = None
    location_preference: Optional[str] = None
    car_ownership:       Flag = None


class GlobalOpportunityRequest(CamelModel):
    job_title:           Optional[str] = None
    years_of_experience: Optional[float] = None
    skills:              list[str] = Field(default_factory=list)
    industry:            Optional[str] = None
    work_mode:           Optional[str] = None
    salary_expectation:  Optional[str] = None
    visa_requirement:    bool = False


class RelocationAffordabilityRequest(CamelModel):
    from_country:      Optional[str] = None
    from_city:         Optional[str] = None
    to_country:        Optional[str] = None
    to_city:           Optional[str] = None
    household_size:    Answer = None
    move_timeline:     Optional[str] = None
    duration:          Optional[str] = None
    current_savings:   Answer = None
    current_salary:    Answer = None
    new_salary_offer:  Answer = None
    debt_obligations:  Answer = None
    housing_size:      Optional[str] = None
    belongings_volume: Optional[str] = None
    pets:              Flag = None
    shipping_vehicle:  Flag = None


class StudyAbroadRequest(CamelModel):
    country:                   Optional[str] = None
    institution_type:          Optional[str] = None
    degree_level:              Optional[str] = None
    program_duration:          Optional[float] = None
    field_of_study:            Optional[str] = None
    tuition_annual:            Optional[float] = Field(None, ge=0)
    living_expenses_monthly:   Optional[float] = None
    visa_fees:                 Optional[float] = None
    travel_costs:              Optional[float] = None
    health_insurance:          Optional[float] = None
    scholarships:              Optional[float] = None
    loan_amount:               Optional[float] = None
    loan_interest_rate:        Optional[float] = None
    family_support:            Optional[float] = None
    part_time_earnings:        Optional[float] = None
    foregone_salary:           Optional[float] = None
    home_country_degree_cost:  Optional[float] = None
    target_career_field:       Optional[str] = None
    target_work_country:       Optional[str] = None
    expected_salary_post_grad: Optional[float] = None


class WorkAbroadSavingsRequest(CamelModel):
    home_country:      Optional[str] = None
    home_salary:       Answer = None
    home_living_cost:  Answer = None
    target_country:    Optional[str] = None
    offered_salary:    Answer = None
    contract_duration: Answer = None
    housing_provided:  Flag = None
    other_benefits:    Optional[str] = None
    rent:              Answer = None
    utilities:         Answer = None
    food:              Answer = None
    transportation:    Answer = None
    healthcare:        Answer = None
    entertainment:     Answer = None
    personal_expenses: Answer = None
    remittances:       Answer = None
    home_expenses:     Answer = None
    debt_payments:     Answer = None
    savings_goal:      Answer = None


# ── Wellbeing ─────────────────────────────────────────────────────────────────

class WorkHappinessRequest(CamelModel):
    ratings:                dict[str, float] = Field(default_factory=dict)
    importance_weights:     dict[str, float] = Field(default_factory=dict)
    time_in_role:           Optional[str] = None
    previous_satisfaction:  Answer = None
    life_stage:             Optional[str] = None
    role:                   Optional[str] = None
    industry:               Optional[str] = None


class WorkLifeBalanceRequest(CamelModel):
    hours_per_week:            Answer = None
    commute_time:              Answer = None
    work_schedule:             Optional[str] = None
    remote_days_per_week:      Answer = None
    vacation_days_taken:       Answer = None
    vacation_days_available:   Answer = None
    after_hours_email:         Optional[str] = None
    weekend_work_frequency:    Optional[str] = None
    work_stress_level:         Answer = None
    sleep_hours:               Answer = None
    exercise_days_per_week:    Answer = None
    hobby_hours_per_week:      Answer = None
    social_connection_quality: Answer = None
    personal_growth_hours:     Answer = None
    health_status:             Optional[str] = None
    overall_happiness:         Answer = None
    work_satisfaction:         Answer = None
    relationship_quality:      Answer = None
    financial_stress:          Answer = None
