"""Tests for repository activity ranking, contributions and consistency."""

from datetime import timedelta

from devsignal.analyzers.activity import (
    calculate_consistency,
    calculate_contributions,
    rank_repositories,
)
from devsignal.models.schemas import Event, EventPayload, Repository


def test_activity_score_formula(make_repo, make_push):
    repo = make_repo("svc", stars=2, forks=1, size=500)
    ranked = rank_repositories([repo], [make_push(repo="alice/svc", size=3)])
    assert ranked[0].recent_commits == 3
    assert ranked[0].activity_score == 3 * 20 + 2 * 10 + 1 * 5 + 5


def test_events_without_push_size_count_one_commit(make_repo, make_pr):
    ranked = rank_repositories([make_repo("tool", owner="bigcorp")], [make_pr(repo="bigcorp/tool")])
    assert ranked[0].recent_commits == 1


def test_ranked_descending_with_fallbacks(make_repo, make_push):
    repos = [make_repo("quiet"), make_repo("busy")]
    ranked = rank_repositories(repos, [make_push(repo="alice/busy", size=4)])
    assert [r.name for r in ranked] == ["busy", "quiet"]
    assert ranked[1].recent_commits == 0
    assert ranked[1].language == "Unknown"
    assert ranked[1].description == "No description provided."


def test_same_short_name_does_not_cross_contaminate(make_repo, make_push):
    mine = make_repo("api", owner="alice")
    theirs = make_repo("api", owner="bob", is_fork=True)
    ranked = {r.is_fork: r for r in rank_repositories([mine, theirs], [make_push(repo="alice/api", size=5)])}
    assert ranked[False].recent_commits == 5
    assert ranked[True].recent_commits == 0


def test_short_name_fallback_collides_without_full_name(make_push):
    repos = [Repository(name="api"), Repository(name="api", is_fork=True)]
    ranked = rank_repositories(repos, [make_push(repo="alice/api", size=5)])
    assert [r.recent_commits for r in ranked] == [5, 5]


def test_contributions(make_push, make_pr, now):
    events = [
        make_push(size=3),
        make_push(size=0),
        make_pr(action="opened"),
        make_pr(action="closed"),
        Event(type="IssuesEvent", created_at=now, payload=EventPayload(action="opened")),
        Event(type="IssueCommentEvent", created_at=now, payload=EventPayload(action="created")),
    ]
    assert calculate_contributions(events) == 5


def test_consistency_labels(make_push, now):
    def days(n):
        return [make_push(days_ago=d) for d in range(n)]

    assert calculate_consistency([]) == "Dormant"
    assert calculate_consistency(days(5)) == "Sporadic"
    assert calculate_consistency(days(6)) == "Weekend Warrior"
    assert calculate_consistency(days(11)) == "Steady Coder"
    assert calculate_consistency(days(21)) == "Daily Grinder"


def test_consistency_counts_distinct_utc_days(make_push, now):
    same_day = [make_push(at=now.replace(hour=h)) for h in range(1, 23)]
    assert calculate_consistency(same_day) == "Sporadic"
    assert calculate_consistency([make_push(at=now - timedelta(hours=13))] + same_day) == "Sporadic"
