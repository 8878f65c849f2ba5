"""
learning_resources.py — Curated learning resources for detected skill gaps.

The skill gap analyzer asks Gemini which skills are missing, then attaches
resources from this static table instead of paying for a second AI call.

resources_for(skill) resolves a skill name in two tiers:
  1. exact, case-sensitive key lookup
  2. case-insensitive substring match against the keys, in either
     direction, in table order
and falls back to a generic search triple. It never returns an empty list.
"""

from pydantic import BaseModel, ConfigDict


class LearningResource(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str      # course | book | practice | certification
    name: str
    platform: str
    cost: str
    hours: int


def _r(type_: str, name: str, platform: str, cost: str, hours: int) -> LearningResource:
    return LearningResource(type=type_, name=name, platform=platform, cost=cost, hours=hours)


# Insertion order matters: the fuzzy tier returns the first key that matches.
LEARNING_RESOURCES: dict[str, tuple[LearningResource, ...]] = {
    # Programming languages
    "JavaScript": (
        _r("course", "JavaScript: The Complete Guide", "Udemy", "Paid (~$15)", 50),
        _r("course", "freeCodeCamp JavaScript", "freeCodeCamp", "Free", 300),
        _r("book", "You Don't Know JS", "GitHub/Amazon", "Free/Paid", 40),
    ),
    "Python": (
        _r("course", "Python for Everybody", "Coursera", "Free", 60),
        _r("course", "Complete Python Bootcamp", "Udemy", "Paid (~$15)", 22),
        _r("practice", "LeetCode Python Track", "LeetCode", "Free/Premium", 100),
    ),
    "Java": (
        _r("course", "Java Programming Masterclass", "Udemy", "Paid (~$15)", 80),
        _r("course", "Java MOOC", "University of Helsinki", "Free", 200),
        _r("certification", "Oracle Certified Professional", "Oracle", "Paid (~$300)", 120),
    ),
    "TypeScript": (
        _r("course", "Understanding TypeScript", "Udemy", "Paid (~$15)", 15),
        _r("book", "Programming TypeScript", "O'Reilly", "Paid (~$40)", 30),
        _r("practice", "TypeScript Exercises", "GitHub", "Free", 20),
    ),
    "React": (
        _r("course", "React - The Complete Guide", "Udemy", "Paid (~$15)", 40),
        _r("course", "React Official Tutorial", "React.dev", "Free", 10),
        _r("practice", "Build 15 React Projects", "YouTube/FreeCodeCamp", "Free", 50),
    ),
    "Node.js": (
        _r("course", "The Complete Node.js Developer Course", "Udemy", "Paid (~$15)", 35),
        _r("course", "Node.js Tutorial", "freeCodeCamp", "Free", 8),
        _r("practice", "Build REST APIs", "YouTube", "Free", 20),
    ),
    "SQL": (
        _r("course", "The Complete SQL Bootcamp", "Udemy", "Paid (~$15)", 9),
        _r("course", "SQL for Data Science", "Coursera", "Free", 20),
        _r("practice", "HackerRank SQL", "HackerRank", "Free", 30),
    ),
    # Cloud and infrastructure
    "AWS": (
        _r("course", "AWS Certified Solutions Architect", "A Cloud Guru", "Paid (~$50/mo)", 40),
        _r("course", "AWS Free Tier Tutorials", "AWS Training", "Free", 20),
        _r("certification", "AWS Solutions Architect Associate", "AWS", "Paid (~$150)", 80),
    ),
    "Docker": (
        _r("course", "Docker Mastery", "Udemy", "Paid (~$15)", 19),
        _r("course", "Docker Tutorial for Beginners", "YouTube", "Free", 3),
        _r("practice", "Docker Labs", "Docker", "Free", 15),
    ),
    "Kubernetes": (
        _r("course", "Kubernetes for Beginners", "Udemy", "Paid (~$15)", 20),
        _r("certification", "CKA: Certified Kubernetes Administrator", "Linux Foundation", "Paid (~$400)", 100),
        _r("practice", "KodeKloud Labs", "KodeKloud", "Paid (~$20/mo)", 40),
    ),
    # Data
    "Machine Learning": (
        _r("course", "Machine Learning by Andrew Ng", "Coursera", "Free", 60),
        _r("course", "Deep Learning Specialization", "Coursera", "Paid (~$50/mo)", 120),
        _r("practice", "Kaggle Competitions", "Kaggle", "Free", 200),
    ),
    "Data Analysis": (
        _r("course", "Google Data Analytics Certificate", "Coursera", "Paid (~$50/mo)", 180),
        _r("course", "Data Analysis with Python", "freeCodeCamp", "Free", 10),
        _r("practice", "DataCamp Projects", "DataCamp", "Paid (~$30/mo)", 50),
    ),
    # Management and soft skills
    "Project Management": (
        _r("course", "Google Project Management Certificate", "Coursera", "Paid (~$50/mo)", 180),
        _r("certification", "PMP Certification", "PMI", "Paid (~$500)", 120),
        _r("book", "PMBOK Guide", "PMI", "Paid (~$50)", 40),
    ),
    "Agile": (
        _r("course", "Agile with Atlassian Jira", "Coursera", "Free", 15),
        _r("certification", "Certified Scrum Master", "Scrum Alliance", "Paid (~$1,500)", 40),
        _r("book", "Scrum: The Art of Doing Twice the Work", "Amazon", "Paid (~$20)", 8),
    ),
    "Communication": (
        _r("course", "Improving Communication Skills", "Coursera", "Free", 20),
        _r("course", "Business Communication", "LinkedIn Learning", "Paid (~$30/mo)", 15),
        _r("book", "Crucial Conversations", "Amazon", "Paid (~$20)", 10),
    ),
    "Leadership": (
        _r("course", "Inspiring Leadership", "Coursera", "Free", 25),
        _r("book", "The First 90 Days", "Amazon", "Paid (~$20)", 12),
        _r("book", "Leaders Eat Last", "Amazon", "Paid (~$20)", 10),
    ),
}

GENERIC_RESOURCES: tuple[LearningResource, ...] = (
    _r("course", "Search on Udemy", "Udemy", "Paid (~$15)", 20),
    _r("course", "Search on Coursera", "Coursera", "Free/Paid", 30),
    _r("practice", "YouTube Tutorials", "YouTube", "Free", 15),
)


def resources_for(skill: str) -> list[LearningResource]:
    """Learning resources for *skill*; the generic triple when nothing matches."""
    if skill in LEARNING_RESOURCES:
        return list(LEARNING_RESOURCES[skill])

    needle = skill.strip().lower()
    if needle:
        for key, resources in LEARNING_RESOURCES.items():
            key_lower = key.lower()
            if needle in key_lower or key_lower in needle:
                return list(resources)

    return list(GENERIC_RESOURCES)
