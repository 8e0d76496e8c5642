"""Per-repository grading, remediation actions and demo discovery."""

from devsignal.analyzers.normalizer import as_utc
from devsignal.models.schemas import DemoRepo, Grade, PriorityFix, Repository, RepoFeedback

MAX_FEEDBACK = 5
MAX_FIXES = 5

# Three phrasings per grade, picked by (len(name) + stars) % 3
TIP_TEMPLATES: dict[Grade, tuple[str, str, str]] = {
    Grade.A_PLUS: (
        "Top Tier! Pin '{name}' to your profile overview so it's the first thing people see.",
        "This is distinct. Consider writing a short article/blog post about how you built '{name}'.",
        "Great engagement! Keep fixing bugs and replying to issues to show you're an active maintainer.",
    ),
    Grade.B: (
        "Good job on the demo. Now ensure '{name}' has a clear \"How to Run\" section in the README.",
        "Nice work. Share '{name}' on LinkedIn/Twitter with a video of it in action to get more stars.",
        "Solid. Add some screenshots or a GIF to the '{name}' README to make it visually appealing.",
    ),
    Grade.C_PLUS: (
        "The code looks good, but '{name}' needs a LIVE DEMO. Use Vercel, Netlify, or GitHub Pages.",
        "Recruiters are busy. They won't clone '{name}'. Host it somewhere so they can click and play.",
        "Can you dockerize '{name}'? Adding a Dockerfile shows advanced DevOps skills to recruiters.",
    ),
    Grade.D: (
        "Mystery Box: '{name}' has no description. Edit the \"About\" section on the right sidebar of the repo.",
        "This repo is a ghost town. Add a README describing what '{name}' does and why you built it.",
        "Don't leave '{name}' empty. Even a single sentence description helps SEO and context.",
    ),
}

DEMO_HOSTS = [
    ("vercel", "Vercel"),
    ("netlify", "Netlify"),
    ("github.io", "GitHub Pages"),
    ("heroku", "Heroku"),
]
PINNED_DEMO = "WEBSITE-CLONE"
DEMO_FALLBACK_DESC = "Project featuring multiple website clones and live demos."


def _updated_ms(repo: Repository) -> float:
    if repo.updated_at is None:
        return 0.0
    return as_utc(repo.updated_at).timestamp() * 1000


def _grade(repo: Repository) -> Grade:
    has_desc = bool(repo.description)
    has_demo = bool(repo.homepage)
    if repo.stars > 5 and has_desc and has_demo:
        return Grade.A_PLUS
    elif has_desc and has_demo:
        return Grade.B
    elif has_desc:
        return Grade.C_PLUS
    return Grade.D


def variety_index(name: str, stars: int) -> int:
    """Stable phrasing selector for a repository."""
    return (len(name) + stars) % 3


def generate_repo_feedback(repositories: list[Repository]) -> list[RepoFeedback]:
    """Grade the top original repositories and attach one improvement tip each.

    Repositories are ranked by stars * 2 + last-update time (ms), so recency
    dominates and stars only separate near-simultaneous updates.
    """
    ranked = sorted(
        (r for r in repositories if not r.is_fork),
        key=lambda r: r.stars * 2 + _updated_ms(r),
        reverse=True,
    )

    feedback = []
    for repo in ranked[:MAX_FEEDBACK]:
        grade = _grade(repo)
        template = TIP_TEMPLATES[grade][variety_index(repo.name, repo.stars)]
        feedback.append(
            RepoFeedback(
                name=repo.name,
                url=repo.html_url,
                language=repo.language or "N/A",
                stars=repo.stars,
                forks=repo.forks,
                grade=grade,
                tip=template.format(name=repo.name),
            )
        )
    return feedback


def _first_action(repo: Repository) -> str | None:
    """First matching remediation rule, or None."""
    name = repo.name
    lang = repo.language or "code"

    if not repo.description:
        suggested = f"A {lang} project for {name.replace('-', ' ')}."
        return f"Action: Add a description to '{name}'. Try: \"{suggested}\" (Impact: +5 pts)"
    if not repo.homepage and not repo.has_pages:
        return (
            f"Action: Deploy '{name}' live (Vercel/Netlify) or add a demo link. "
            "Recruiters want to click and see, not just read code. (Impact: +10 pts)"
        )
    if repo.open_issues > 5:
        return (
            f"Action: Close or label old issues in '{name}'. "
            "High issue counts look abandoned. (Impact: +5 pts)"
        )
    if not repo.license:
        return (
            f"Action: Add an MIT/Apache license to '{name}'. "
            "Unlicensed code is a red flag for companies. (Impact: +5 pts)"
        )
    if not repo.topics:
        return (
            f"Action: Add GitHub Topics (#{lang.lower()}, #web) to '{name}'. "
            "This makes your skills searchable by recruiters. (Impact: +3 pts)"
        )
    return None


def get_priority_fixes(
    repositories: list[Repository],
    excluded_names: set[str] | None = None,
) -> list[PriorityFix]:
    """Emit one remediation action per repository, most recently updated first.

    Args:
        repositories: All account repositories; forks are skipped.
        excluded_names: Repositories already surfaced by the feedback generator.

    Returns:
        Up to 5 repositories that produced an action.
    """
    excluded_names = excluded_names or set()
    candidates = sorted(
        (r for r in repositories if not r.is_fork and r.name not in excluded_names),
        key=_updated_ms,
        reverse=True,
    )

    fixes = []
    for repo in candidates:
        action = _first_action(repo)
        if action:
            fixes.append(PriorityFix(name=repo.name, issues=[action]))
        if len(fixes) == MAX_FIXES:
            break
    return fixes


def _demo_host(homepage: str) -> str:
    for marker, host in DEMO_HOSTS:
        if marker in homepage:
            return host
    return "GitHub"


def get_demo_repos(repositories: list[Repository]) -> list[DemoRepo]:
    """Original repositories with a live demo link or a clone showcase."""
    demos = [
        DemoRepo(
            name=r.name,
            url=r.html_url,
            demo=r.homepage or r.html_url,
            desc=r.description or DEMO_FALLBACK_DESC,
            host=_demo_host(r.homepage) if r.homepage else "Live Demo via Repo",
        )
        for r in repositories
        if not r.is_fork and (r.homepage or "clone" in r.name.lower())
    ]
    demos.sort(key=lambda d: d.name != PINNED_DEMO)
    return demos


def calculate_potential_score(current_score: int, fix_count: int) -> int:
    """Projected score if every priority fix were applied."""
    return min(current_score + fix_count * 8, 100)
