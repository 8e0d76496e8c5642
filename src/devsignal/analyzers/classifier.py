"""Role inference and technology inventory from repository metadata."""

import math
import re

from devsignal.analyzers.normalizer import half_up
from devsignal.models.schemas import LanguageShare, Repository, TechSkill

# Category -> matcher over lower-cased "name description language" text
ROLE_PATTERNS: dict[str, re.Pattern[str]] = {
    "frontend": re.compile(r"react|vue|angular|svelte|next|nuxt|css|html|tailwind|bootstrap|redux"),
    "backend": re.compile(r"node|express|django|flask|spring|sql|mongo|postgres|firebase|api|graphql|nest"),
    "data": re.compile(r"python|pandas|numpy|torch|scikit|tensorflow|keras|data|analysis|jupyter"),
    "mobile": re.compile(r"flutter|swift|kotlin|android|ios|react native|ionic"),
    "devops": re.compile(r"docker|kubernetes|aws|ci/cd|jenkins|terraform|ansible"),
}

ROLE_LABELS = {
    "frontend": "Frontend Specialist",
    "backend": "Backend Engineer",
    "data": "Data Scientist / ML Engineer",
    "mobile": "Mobile App Developer",
    "devops": "DevOps Engineer",
}

GENERALIST = "Generalist Developer"
ASPIRING = "Aspiring Developer"
FULL_STACK = "Full Stack Developer"

TECH_WHITELIST = [
    "react", "node", "express", "python", "django", "flask", "aws", "docker", "css", "html",
    "javascript", "typescript", "vue", "angular", "nextjs", "tailwindcss", "mongodb",
    "postgresql", "vite", "ui/ux", "sql", "nosql", "java", "spring", "kotlin", "android",
    "swift", "ios", "flutter", "redux", "graphql", "rest api", "jest", "cypress", "webpack",
    "babel", "bootstrap", "material-ui", "shadcn", "prisma", "sequelize",
]

# Tooling that shows up as a "language" but says nothing about skills
LANGUAGE_DENYLIST = {"git", "figma", "firebase", "github"}

MAX_TECH_STACK = 18
MAX_LANGUAGES = 8


def _role_text(repo: Repository) -> str:
    return f"{repo.name} {repo.description or ''} {repo.language or ''}".lower()


def count_role_signals(repositories: list[Repository]) -> dict[str, int]:
    """Count repositories matching each role category."""
    counts = {category: 0 for category in ROLE_PATTERNS}
    for repo in repositories:
        text = _role_text(repo)
        for category, pattern in ROLE_PATTERNS.items():
            if pattern.search(text):
                counts[category] += 1
    return counts


def detect_role_fit(repositories: list[Repository]) -> str:
    """Infer a primary role label from repository text.

    Ties between categories keep the declaration order of ROLE_PATTERNS.
    """
    counts = count_role_signals(repositories)
    top_role, top_count = sorted(counts.items(), key=lambda item: -item[1])[0]

    if top_count == 0:
        return GENERALIST
    if top_count < 3:
        return ASPIRING
    if counts["frontend"] > 2 and counts["backend"] > 2:
        return FULL_STACK
    return ROLE_LABELS.get(top_role, "Software Engineer")


def calculate_tech_stack(repositories: list[Repository]) -> list[TechSkill]:
    """Rank technologies by accumulated signal weight.

    Signals per repository:
    - Primary language: +1 (denylisted tooling skipped)
    - Whitelisted topic tag: +1
    - Whitelisted term inside name/description: +0.5
    """
    skills: dict[str, float] = {}

    for repo in repositories:
        if repo.language:
            lang = repo.language.lower()
            if lang not in LANGUAGE_DENYLIST:
                skills[lang] = skills.get(lang, 0) + 1

        for topic in repo.topics:
            topic = topic.lower()
            if topic in TECH_WHITELIST:
                skills[topic] = skills.get(topic, 0) + 1

        content = f"{repo.name} {repo.description or ''}".lower()
        for tech in TECH_WHITELIST:
            if tech in content:
                skills[tech] = skills.get(tech, 0) + 0.5

    ranked = sorted(skills.items(), key=lambda item: -item[1])[:MAX_TECH_STACK]
    return [TechSkill(name=name, count=math.ceil(weight)) for name, weight in ranked]


def calculate_language_breakdown(repositories: list[Repository]) -> list[LanguageShare]:
    """Share of repositories per primary language, top 8."""
    counts: dict[str, int] = {}
    for repo in repositories:
        if repo.language:
            counts[repo.language] = counts.get(repo.language, 0) + 1

    total = sum(counts.values())
    if total == 0:
        return []

    shares = [
        LanguageShare(
            language=lang,
            count=count,
            percentage=half_up(count / total * 100),
        )
        for lang, count in counts.items()
    ]
    shares.sort(key=lambda s: -s.count)
    return shares[:MAX_LANGUAGES]
