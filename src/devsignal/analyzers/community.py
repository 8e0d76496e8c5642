"""Community health index over original repositories."""

from devsignal.analyzers.normalizer import events_of_type, half_up, partition_repositories
from devsignal.models.schemas import CommunityHealth, Event, EventType, Repository


def evaluate_community_health(
    repositories: list[Repository],
    events: list[Event],
) -> CommunityHealth:
    """Blend license coverage, forks, issues and commit volume into a 0-100 index.

    Health = licenseRatio * 50 + min(forks, 10) * 3 + min(commits, 20), capped at 100.
    Vitality points (commits * 2 + forks * 5 + issues * 2) are averaged per repo
    for display only.
    """
    original, _ = partition_repositories(repositories)
    if not original:
        return CommunityHealth()

    with_license = sum(1 for r in original if r.license)
    total_forks = sum(r.forks for r in original)
    open_issues = sum(r.open_issues for r in original)
    total_commits = sum(e.payload.size or 0 for e in events_of_type(events, EventType.PUSH))

    vitality_points = total_commits * 2 + total_forks * 5 + open_issues * 2

    license_score = with_license / len(original) * 50
    fork_score = min(total_forks, 10) * 3
    activity_score = min(total_commits, 20)
    health_score = half_up(min(license_score + fork_score + activity_score, 100))

    return CommunityHealth(
        license_count=with_license,
        total_repos=len(original),
        total_forks=total_forks,
        open_issues=open_issues,
        avg_activity=half_up(vitality_points / len(original) * 10) / 10,
        health_score=max(0, health_score),
    )
