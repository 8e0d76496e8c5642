"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from devsignal.models.schemas import (
    Account,
    Commit,
    Event,
    EventPayload,
    PullRequestInfo,
    Repository,
)

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed observation instant."""
    return NOW


@pytest.fixture
def make_repo():
    """Factory for repositories owned by 'alice', updated yesterday by default."""

    def _make(name="project", owner="alice", **overrides):
        fields = {
            "name": name,
            "full_name": f"{owner}/{name}",
            "html_url": f"https://github.com/{owner}/{name}",
            "updated_at": NOW - timedelta(days=1),
            "created_at": NOW - timedelta(days=30),
        }
        fields.update(overrides)
        return Repository(**fields)

    return _make


@pytest.fixture
def make_push():
    """Factory for push events carrying one commit per message."""

    def _make(days_ago=0, messages=("update",), repo="alice/project", size=None, at=None):
        commits = [Commit(sha=f"{i:07x}", message=m) for i, m in enumerate(messages)]
        return Event(
            type="PushEvent",
            created_at=at or NOW - timedelta(days=days_ago),
            repo_name=repo,
            payload=EventPayload(size=len(commits) if size is None else size, commits=commits),
        )

    return _make


@pytest.fixture
def make_pr():
    """Factory for pull request events."""

    def _make(repo="bigcorp/tool", action="opened", title="Add feature", merged=False, days_ago=0):
        return Event(
            type="PullRequestEvent",
            created_at=NOW - timedelta(days=days_ago),
            repo_name=repo,
            payload=EventPayload(
                action=action,
                pull_request=PullRequestInfo(title=title, merged=merged),
            ),
        )

    return _make


@pytest.fixture
def empty_account():
    return Account(login="ghost")


@pytest.fixture
def showcase_account():
    """Account with a bio and nothing else."""
    return Account(login="alice", bio="Builder of caches", public_repos=1)


@pytest.fixture
def showcase_repo(make_repo):
    """A documented, demoed, licensed and starred original repository."""
    return make_repo(
        "cache-service",
        description="A caching layer for web services",
        homepage="https://cache-service.vercel.app",
        stars=10,
        license="MIT",
        topics=["python"],
        language="Python",
        created_at=NOW - timedelta(days=730),
    )


@pytest.fixture
def conventional_pushes(make_push):
    """Eleven days of conventional-commit pushes to the showcase repository."""
    return [
        make_push(days_ago=d, messages=(f"feat: step {d}",), repo="alice/cache-service")
        for d in range(11)
    ]
