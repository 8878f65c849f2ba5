"""
leadership_resources.py — Certifications and reading for the leadership
readiness score.

Like the skill gap resources, these are attached from a static table after
the AI call, so the links and prices shown never come from the model.

select_certifications(skills, target_role) picks up to four certifications
from the skills the user already listed and the seniority of the target
role. It never returns an empty list.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

MAX_CERTIFICATIONS = 4
RESOURCES_SHOWN = 6

_SENIOR_TITLES = ("MANAGER", "DIRECTOR", "VP", "EXECUTIVE")


class Certification(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    name: str
    provider: str
    relevance: str      # high | medium
    timeframe: str
    cost_range: str
    rationale: str


class LeadershipResource(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str           # book | course | podcast
    title: str
    author: str
    relevance: str
    priority: str       # high | medium


def _c(name, provider, relevance, timeframe, cost_range, rationale) -> Certification:
    return Certification(
        name=name, provider=provider, relevance=relevance,
        timeframe=timeframe, cost_range=cost_range, rationale=rationale,
    )


def _r(type_, title, author, relevance, priority="high") -> LeadershipResource:
    return LeadershipResource(type=type_, title=title, author=author, relevance=relevance, priority=priority)


CERTIFICATIONS: dict[str, tuple[Certification, ...]] = {
    "Strategic": (
        _c("Executive Leadership Certificate", "Cornell University", "high",
           "3-6 months", "$3,000-$6,000",
           "Builds strategic thinking and executive presence for senior roles."),
        _c("Strategic Leadership and Management", "MIT Sloan", "high",
           "2-3 months", "$2,500-$5,000",
           "Frameworks for setting direction and leading organisational change."),
    ),
    "Team Management": (
        _c("Leadership and Management Certificate", "Harvard Extension School", "high",
           "4-8 months", "$5,000-$10,000",
           "Covers team building, delegation and performance management in depth."),
        _c("Certified Manager (CM)", "Institute of Certified Professional Managers", "medium",
           "3-6 months", "$1,000-$2,500",
           "A recognised baseline credential for first-line managers."),
    ),
    "Communication": (
        _c("Executive Communication Certificate", "Northwestern University", "high",
           "2-3 months", "$2,000-$4,000",
           "Sharpens stakeholder communication and presenting to leadership."),
    ),
    "Change Management": (
        _c("Change Management Certification", "Prosci", "high",
           "1-2 months", "$3,000-$5,000",
           "The most widely used methodology for leading teams through change."),
    ),
    "Project Management": (
        _c("PMP (Project Management Professional)", "PMI", "high",
           "3-6 months", "$1,000-$2,000",
           "Shows you can run large cross-functional initiatives end to end."),
    ),
    "Agile": (
        _c("Certified Scrum Master (CSM)", "Scrum Alliance", "medium",
           "1-2 months", "$1,000-$1,500",
           "Useful for leading delivery teams that work in sprints."),
    ),
}

RESOURCES: tuple[LeadershipResource, ...] = (
    _r("book", "The First 90 Days", "Michael D. Watkins", "Playbook for the first months in a new leadership role"),
    _r("book", "Leaders Eat Last", "Simon Sinek", "Why teams follow leaders who put them first"),
    _r("book", "Dare to Lead", "Brené Brown", "Courage and candour in day-to-day leadership"),
    _r("book", "Radical Candor", "Kim Scott", "Giving feedback that is direct and caring"),
    _r("course", "Leadership Principles", "Amazon (via Coursera)", "Leadership frameworks used at large companies"),
    _r("course", "Inspirational Leadership", "HEC Paris", "Emotional intelligence and influence", "medium"),
    _r("podcast", "HBR IdeaCast", "Harvard Business Review", "Weekly interviews on leadership and management"),
    _r("podcast", "The Tim Ferriss Show", "Tim Ferriss", "Habits of high performers and leaders", "medium"),
)

# Skills the user ticked → certification they unlock. Checked in order.
_SKILL_RULES: tuple[tuple[tuple[str, ...], Certification], ...] = (
    (("Team Building", "Delegation"), CERTIFICATIONS["Team Management"][0]),
    (("Communication", "Stakeholder Management"), CERTIFICATIONS["Communication"][0]),
    (("Change Management", "Vision Setting"), CERTIFICATIONS["Change Management"][0]),
    (("Project Management",), CERTIFICATIONS["Project Management"][0]),
    (("Agile Leadership",), CERTIFICATIONS["Agile"][0]),
)


def select_certifications(leadership_skills: list[str], target_role: str) -> list[Certification]:
    selected: list[Certification] = []
    if any(title in (target_role or "").upper() for title in _SENIOR_TITLES):
        selected.append(CERTIFICATIONS["Strategic"][0])

    skills = set(leadership_skills or ())
    for triggers, certification in _SKILL_RULES:
        if skills.intersection(triggers):
            selected.append(certification)

    fallback = CERTIFICATIONS["Strategic"][1]
    if len(selected) < 3 and fallback not in selected:
        selected.append(fallback)
    return selected[:MAX_CERTIFICATIONS]


def recommended_resources() -> list[LeadershipResource]:
    return list(RESOURCES[:RESOURCES_SHOWN])
