"""Day-by-day engineering impact classification over a fixed window."""

import re
from datetime import date, datetime, timedelta, timezone

from devsignal.analyzers.normalizer import as_utc, short_repo_name, utc_date
from devsignal.models.schemas import Event, EventType, ImpactDay, ImpactTimeline

WINDOW_DAYS = 60
MAX_HIGHLIGHTS = 5
MAX_COMMIT_HIGHLIGHTS = 3

FEATURE_COMMIT = re.compile(r"^(feat|fix|refactor|perf|test|build|ci):")

WORKFLOW_TYPES = {EventType.WORKFLOW_RUN.value, EventType.WORKFLOW_JOB.value}

FEATURE_SUMMARIES = [
    "Engineered high-fidelity feature set for {repo}",
    "Optimized modular core architecture of {repo}",
    "Spearheaded technical refactor in {repo} codebase",
    "Refined architectural logic and assets: {repo}",
    "Implemented structural system upgrades for {repo}",
    "Advanced architectural sprint in {repo} modules",
    "Deployed technical debt clearance modules for {repo}",
    "Hardened production logic in {repo} components",
]

ROUTINE_SUMMARIES = [
    "Synchronized technical assets in {repo}",
    "Refined project state and dependencies: {repo}",
    "Updated repository modules in {repo} tree",
    "Maintained system integrity for {repo} project",
    "Iterative logic refinement in {repo} service",
    "Polished technical documentation and core in {repo}",
    "Optimized asset pipeline for {repo} repository",
    "Managed codebase evolution in {repo} modules",
]

PUSH_FALLBACK_HIGHLIGHTS = [
    "Integrated {size} distinct logic modules into master.",
    "Established stable upstream logic for {repo}.",
    "Provisioned core structural assets for system expansion.",
    "Mapped new feature-set to isolated dev environments.",
    "Validated logic deltas for {repo} production branch.",
    "Streamlined system telemetry and module state.",
    "Enforced architectural standards across {size} files.",
    "Optimized codebase maintainability via delta updates.",
]

PR_HIGHLIGHTS = [
    "Initiated cross-functional code review and logic refinement.",
    "Streamlined system architecture via atomic PR logic.",
    "Validated regression tests and module integrity.",
    "Optimized codebase maintainability through peer-reviewed updates.",
    "Coordinated structural module integration for {repo}.",
    "Resolved complex architectural conflicts in PR workflow.",
    "Formalized technical implementation depth for {repo}.",
    "Audited technical specs and implementation rigor.",
]

WORKFLOW_HIGHLIGHTS = [
    "Configured CI/CD pipeline telemetry and logic gates.",
    "Optimized automated build/test cycles for production.",
    "Enforced production-grade security and logic gates.",
    "Hardened deployment orchestration pipeline for {repo}.",
    "Orchestrated automated system health checks.",
    "Refined DevOps logic for high-velocity deployment.",
    "Established automated rollback and recovery protocols.",
    "Mapped CI/CD triggers to architectural deltas.",
]

CREATE_HIGHLIGHTS = [
    "Initialized new architectural branch for feature isolation.",
    "Established stable upstream logic for {repo} project.",
    "Provisioned core structural assets for system expansion.",
    "Mapped new feature-set to isolated dev environments.",
    "Architected repository structure for scalable expansion.",
    "Seeded high-fidelity codebase with core modules.",
    "Defined structural boundaries for upcoming milestones.",
    "Isolated system logic from legacy dependencies.",
]

ACHIEVEMENTS = [
    "Architected high-impact system logic and professional CI/CD automation.",
    "Engineered robust architectural patterns with Staff-level system ownership.",
    "Optimized technical debt through consistent high-fidelity refactoring.",
    "Spearheaded production-grade system migrations and logic refinement.",
    "Established elite scaling patterns across multiple high-volume codebases.",
    "Refined technical authority through sustained contribution velocity.",
    "Orchestrated cross-repo logic deltas with precision and rigor.",
    "Maintained high engineering signal across complex project lifecycles.",
]


def variety_index(day: date, repo: str, event_type: str, push_size: int) -> int:
    """Stable template selector derived only from the event's own fields."""
    return (len(day.isoformat()) + len(repo) + len(event_type) + push_size) % 10


def _pick(pool: list[str], index: int, **values: object) -> str:
    return pool[index % len(pool)].format(**values)


def _empty_window(today: date) -> dict[date, ImpactDay]:
    return {
        today - timedelta(days=offset): ImpactDay(date=today - timedelta(days=offset))
        for offset in range(WINDOW_DAYS)
    }


def _apply_push(day: ImpactDay, event: Event, repo: str, idx: int) -> None:
    payload = event.payload
    commits = payload.commits
    is_feature = any(FEATURE_COMMIT.match(c.message) for c in commits)

    day.level = max(day.level, 3 if is_feature else 2)
    day.type = "feature" if is_feature else "routine"
    day.summary = _pick(FEATURE_SUMMARIES if is_feature else ROUTINE_SUMMARIES, idx, repo=repo)

    commit_lines = [c.message.split("\n")[0] for c in commits[:MAX_COMMIT_HIGHLIGHTS]]
    if commit_lines:
        day.highlights.extend(commit_lines)
    else:
        day.highlights.append(
            _pick(PUSH_FALLBACK_HIGHLIGHTS, idx, repo=repo, size=payload.size or 1)
        )


def _apply_pull_request(day: ImpactDay, event: Event, repo: str, idx: int) -> None:
    pr = event.payload.pull_request
    title = pr.title if pr and pr.title else "Untitled change"
    merged = event.payload.action == "closed" and bool(pr and pr.merged)

    day.level = 4 if merged else 3
    day.type = "refactor"
    day.summary = (
        f"Merged Architectural PR: {title}" if merged else f"Proposed System Refinement: {title}"
    )
    day.highlights.append(_pick(PR_HIGHLIGHTS, idx, repo=repo))


def _apply_architecture(day: ImpactDay, event: Event, repo: str, idx: int) -> None:
    day.level = 5
    day.type = "architecture"

    if event.type in WORKFLOW_TYPES:
        day.summary = f"Systems Automation Logic on {repo}"
        day.highlights.append(_pick(WORKFLOW_HIGHLIGHTS, idx, repo=repo))
    else:
        branch = event.payload.ref or "stable"
        day.summary = f"Initializing High-Fidelity Entity: {branch} in {repo}"
        day.highlights.append(_pick(CREATE_HIGHLIGHTS, idx, repo=repo))


def classify(events: list[Event], now: datetime | None = None) -> ImpactTimeline:
    """Bucket events into a 60-day timeline, newest day first.

    Levels: 0 idle, 2 routine push, 3 feature push or opened PR, 4 merged PR,
    5 automation or repository creation. Push events only ever raise a day's
    level; pull request and architecture events overwrite it. Days touching
    more than two repositories get an orchestration summary.

    Args:
        events: Activity events, any order.
        now: Observation instant; the window ends on its UTC date.

    Returns:
        Exactly 60 days with no gaps, plus a top achievement line.
    """
    today = as_utc(now).date() if now else datetime.now(timezone.utc).date()
    days = _empty_window(today)

    for event in events:
        day = days.get(utc_date(event.created_at))
        if day is None:
            continue

        repo = short_repo_name(event.repo_name or "unknown/repo")
        if repo not in day.repos:
            day.repos.append(repo)

        idx = variety_index(day.date, repo, event.type, event.payload.size or 0)

        if event.type == EventType.PUSH.value:
            _apply_push(day, event, repo, idx)
        elif event.type == EventType.PULL_REQUEST.value:
            _apply_pull_request(day, event, repo, idx)
        elif event.type in WORKFLOW_TYPES or event.type == EventType.CREATE.value:
            _apply_architecture(day, event, repo, idx)

    for day in days.values():
        if len(day.repos) > 2:
            day.summary = f"Full-Stack Orchestration: {len(day.repos)} systems synchronized"
        day.highlights = list(dict.fromkeys(day.highlights))[:MAX_HIGHLIGHTS]

    return ImpactTimeline(
        impact_days=sorted(days.values(), key=lambda d: d.date, reverse=True),
        top_achievement=ACHIEVEMENTS[len(events) % len(ACHIEVEMENTS)],
    )
