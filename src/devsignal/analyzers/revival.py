"""Revival missions for under-selling repositories."""

from devsignal.models.schemas import RepoActivity, RevivalPlan

MAX_PLANS = 3
TASKS_PER_PLAN = 3

TECH_MISSIONS: dict[str, list[str]] = {
    "javascript": [
        "Implement Recursive Type Definitions",
        "Add Architectural Class Diagram to README",
        "Configure Automated Documentation Pipeline",
        "Refactor to ES6+ Class Composition",
        "Implement Singleton Design Pattern for State",
        "Migration to Factory Pattern for Object Creation",
        "Add JSDoc for complex logic flows",
        "Implement Memoization for expensive calculations",
    ],
    "typescript": [
        "Enable Strict Mode and resolve all 'any' types",
        "Automate API Documentation with TypeDoc",
        "Implement Unit Testing with 80% coverage",
        "Implement Utility Types for API responses",
        "Add Decorators for cross-cutting concerns",
        "Refactor to Abstract Interface patterns",
        "Setup strict TSLint rules for architecture",
        "Implement discriminated unions for state",
    ],
    "python": [
        "Implement PEP8 Linting and type hinting",
        "Add Architectural Flowchart for data processing",
        "Setup Automated Pytest Pipeline",
        "Refactor to AsyncIO for I/O bound tasks",
        "Implement Decorators for logging/auth",
        "Add Pydantic models for data validation",
        "Implementation of Context Managers for resources",
        "Setup Poetry for modern dependency management",
    ],
    "react": [
        "Refactor to High-Performance Composition patterns",
        "Add visual Storybook for Component isolation",
        "Optimize render performance with Memo/UseCallback",
        "Implement Custom Hooks for state separation",
        "Migration to Context API from prop drilling",
        "Add Error Boundaries for system resilience",
        "Transition to Atomic Design structure",
        "Implement HOCs for shared logic",
    ],
    "docker": [
        "Optimize Layer Caching for faster deployments",
        "Implement Multi-stage builds for security",
        "Setup Automated Image Scanning",
        "Add Healthcheck probes for orchestration",
        "Minimize Image size with Alpine base",
        "Implement Secret management patterns",
        "Configure Compose for local microservices",
        "Setup Logging drivers for persistence",
    ],
    "html": [
        "Refactor to Semantic HTML5 for SEO",
        "Implement Aria Roles for accessibility",
        "Add Meta tagging for Social Graph optimization",
        "Optimize asset loading with WebP/Lazy-loading",
        "Implement BEM naming for CSS sustainability",
        "Add critical path CSS for FCP speed",
        "Setup SASS/SCSS for modular styling",
        "Implement Responsive Design breakpoints",
    ],
}

IMPACT_STEPS = ["+11%", "+13%", "+16%", "+18%", "+21%"]
MISSION_NAMES = [
    "WEEKEND MISSION LOG",
    "NIGHTLY ARCHITECTURE SPRINT",
    "TECHNICAL DEBT CLEARANCE",
    "HIGH-FIDELITY REFACTOR",
    "SYSTEM DESIGN SPRINT",
    "CODE QUALITY PUSH",
]

FALLBACK_PLAN = RevivalPlan(
    repo="New Masterpiece Project",
    why="No local assets detected for revival. Architecture simulation required.",
    tasks=["Initialize TypeScript Monorepo", "Setup CI/CD Actions", "Draft System Design Doc"],
    bonus="This massive upgrade could push you into the 'Industry Authority' tier.",
)


def _why(repo: RepoActivity, index: int) -> str:
    variations = [
        f"High architectural signal in {repo.language or 'codebase'} but lacks Tier-1 documentation.",
        f"Found significant code volume ({repo.size}KB) that is currently underselling your skills.",
        "The complexity of this module suggests missed opportunities for professional signaling.",
        f"Untapped technical authority detected in legacy components of {repo.name}.",
    ]
    return variations[index % len(variations)]


def _tasks(repo: RepoActivity, index: int) -> list[str]:
    pool = TECH_MISSIONS.get(repo.language.lower(), TECH_MISSIONS["javascript"])
    offset = (index + repo.size) % len(pool)
    rotated = pool[offset:] + pool[:offset]
    return rotated[:TASKS_PER_PLAN]


def plan_revivals(repositories: list[RepoActivity]) -> list[RevivalPlan]:
    """Pick up to three original repositories and draft a mission for each.

    Candidates are ranked by stars * 2 + size / 100. Task selection rotates the
    language's mission pool by (rank + size), so the same input always yields
    the same plan.
    """
    candidates = sorted(
        (r for r in repositories if not r.is_fork),
        key=lambda r: r.stars * 2 + r.size / 100,
        reverse=True,
    )[:MAX_PLANS]

    plans = []
    for index, repo in enumerate(candidates):
        if repo.stars > 10:
            bonus = "Special Reward: This massive upgrade could push you into the 'Industry Authority' tier."
        else:
            impact = IMPACT_STEPS[(index + repo.size) % len(IMPACT_STEPS)]
            bonus = f"Impact Upgrade: This refactor will push your 'Engineering Depth' signal by {impact}."

        plans.append(
            RevivalPlan(
                repo=repo.name,
                why=_why(repo, index),
                tasks=_tasks(repo, index),
                bonus=bonus,
                mission_name=MISSION_NAMES[(index + repo.stars) % len(MISSION_NAMES)],
            )
        )

    if not plans:
        plans.append(FALLBACK_PLAN.model_copy(deep=True))
    return plans
