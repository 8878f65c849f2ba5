"""
study_abroad.py — Cost side of the study abroad ROI calculator.

Everything the user typed in is priced here, before the AI call; Gemini
only sees the resulting net investment and adds the salary and career
outlook. Missing amounts count as zero except:

  - program duration defaults to 2 years
  - loan interest defaults to 5% a year, repaid over 10 years
  - every program carries a flat 2,000 for books and materials
"""

from careertools.models.insights import StudyAbroadRequest

DEFAULT_PROGRAM_YEARS = 2
DEFAULT_LOAN_RATE = 5.0
LOAN_YEARS = 10
MATERIALS_COST = 2000


def monthly_loan_payment(principal: float, annual_rate: float, years: int = LOAN_YEARS) -> float:
    """Standard amortised payment; 0 when nothing was borrowed."""
    if principal <= 0:
        return 0.0
    payments = years * 12
    rate = annual_rate / 100 / 12
    if rate == 0:
        return principal / payments
    growth = (1 + rate) ** payments
    return principal * rate * growth / (growth - 1)


def roi_breakdown(payload: StudyAbroadRequest) -> dict:
    years = payload.program_duration or DEFAULT_PROGRAM_YEARS
    months = years * 12

    tuition = (payload.tuition_annual or 0) * years
    living = (payload.living_expenses_monthly or 0) * months
    visa = payload.visa_fees or 0
    travel = payload.travel_costs or 0
    insurance = (payload.health_insurance or 0) * months
    direct = tuition + living + visa + travel + insurance + MATERIALS_COST

    foregone = (payload.foregone_salary or 0) * years

    principal = payload.loan_amount or 0
    rate = payload.loan_interest_rate or DEFAULT_LOAN_RATE
    monthly = monthly_loan_payment(principal, rate)
    repayment = monthly * LOAN_YEARS * 12
    interest = repayment - principal if principal > 0 else 0.0

    total_investment = direct + foregone + interest

    scholarships = payload.scholarships or 0
    family = payload.family_support or 0
    part_time = (payload.part_time_earnings or 0) * months
    funding = scholarships + family + part_time

    net = total_investment - funding
    home_cost = payload.home_country_degree_cost or 0

    return {
        "investmentBreakdown": {
            "directCosts": {
                "tuition": tuition,
                "livingExpenses": living,
                "visaImmigration": visa,
                "travel": travel,
                "healthInsurance": insurance,
                "materials": MATERIALS_COST,
                "subtotal": direct,
            },
            "opportunityCosts": {
                "foregoneSalary": foregone,
                "lostCareerProgression": 0,
                "subtotal": foregone,
            },
            "financingCosts": {
                "loanInterest": interest,
                "subtotal": interest,
            },
            "totalInvestment": total_investment,
        },
        "funding": {
            "scholarships": scholarships,
            "familySupport": family,
            "partTimeEarnings": part_time,
            "totalFunding": funding,
        },
        "netInvestment": net,
        "loanDetails": {
            "principal": principal,
            "interestRate": rate,
            "totalRepayment": repayment,
            "monthlyPayment": monthly,
            "repaymentYears": LOAN_YEARS,
        },
        "comparison": {
            "homeCountryDegreeCost": home_cost,
            "premiumForInternational": net - home_cost,
        },
    }
