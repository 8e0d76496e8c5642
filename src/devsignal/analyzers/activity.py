"""Event-derived activity metrics: repository ranking, contributions, consistency."""

from dataclasses import dataclass

from devsignal.analyzers.normalizer import active_days, short_repo_name
from devsignal.models.schemas import Event, EventType, Repository, RepoActivity


@dataclass
class _RepoEventStats:
    events: int = 0
    commits: int = 0

    @property
    def recent_commits(self) -> int:
        # Seen in events but no push sizes recorded still counts as one commit
        return max(self.commits, 1 if self.events > 0 else 0)


def _collect_stats(events: list[Event]) -> tuple[dict[str, _RepoEventStats], dict[str, _RepoEventStats]]:
    """Aggregate per-repository event stats keyed by full name and by short name."""
    by_full: dict[str, _RepoEventStats] = {}
    by_short: dict[str, _RepoEventStats] = {}

    for event in events:
        if not event.repo_name:
            continue
        buckets = (
            by_full.setdefault(event.repo_name.lower(), _RepoEventStats()),
            by_short.setdefault(short_repo_name(event.repo_name), _RepoEventStats()),
        )
        for stats in buckets:
            stats.events += 1
            if event.type == EventType.PUSH.value and event.payload.size:
                stats.commits += event.payload.size

    return by_full, by_short


def rank_repositories(repositories: list[Repository], events: list[Event]) -> list[RepoActivity]:
    """Rank every repository by activity score, highest first.

    activity = commits * 20 + stars * 10 + forks * 5 + size / 100

    Events are attributed through the repository's full owner/name when the
    record carries one. Records without a full name fall back to matching the
    short name, where same-named repositories of different owners collide.
    """
    by_full, by_short = _collect_stats(events)

    ranked = []
    for repo in repositories:
        if repo.full_name:
            stats = by_full.get(repo.full_name.lower(), _RepoEventStats())
        else:
            stats = by_short.get(repo.name, _RepoEventStats())

        commits = stats.recent_commits
        ranked.append(
            RepoActivity(
                name=repo.name,
                url=repo.html_url,
                language=repo.language or "Unknown",
                stars=repo.stars,
                forks=repo.forks,
                size=repo.size,
                recent_commits=commits,
                updated_at=repo.updated_at,
                description=repo.description or "No description provided.",
                is_fork=repo.is_fork,
                activity_score=commits * 20 + repo.stars * 10 + repo.forks * 5 + repo.size / 100,
            )
        )

    ranked.sort(key=lambda r: r.activity_score, reverse=True)
    return ranked


def calculate_contributions(events: list[Event]) -> int:
    """Pushed commits plus opened pull requests and issues."""
    count = 0
    for event in events:
        if event.type == EventType.PUSH.value:
            count += event.payload.size or 0
        elif event.type in (EventType.PULL_REQUEST.value, EventType.ISSUES.value):
            if event.payload.action == "opened":
                count += 1
    return count


def calculate_consistency(events: list[Event]) -> str:
    """Label how regularly the account shows up."""
    if not events:
        return "Dormant"

    days = len(active_days(events))
    if days > 20:
        return "Daily Grinder"
    if days > 10:
        return "Steady Coder"
    if days > 5:
        return "Weekend Warrior"
    return "Sporadic"
