"""Tests for the end-to-end profile pipeline."""

from datetime import timedelta

import httpx
import pytest

from devsignal.analyzers.github import GitHubFetcher, ProfileNotFoundError
from devsignal.analyzers.llm import fallback_review
from devsignal.analyzers.pipeline import ProfilePipeline, recent_push_buffer

REPO_JSON = {
    "name": "cache-service",
    "full_name": "alice/cache-service",
    "description": "A caching layer",
    "language": "Python",
    "stargazers_count": 10,
    "updated_at": "2024-06-14T00:00:00Z",
    "created_at": "2022-01-01T00:00:00Z",
}


def _push(created_at, size):
    return {
        "type": "PushEvent",
        "created_at": created_at,
        "repo": {"name": "alice/cache-service"},
        "payload": {"size": size, "commits": [{"sha": "a", "message": "feat: cache"}]},
    }


def _handler(request):
    path = request.url.path
    if path == "/users/alice":
        return httpx.Response(200, json={"login": "alice", "bio": "Builder", "public_repos": 1})
    if path == "/users/alice/repos":
        return httpx.Response(200, json=[REPO_JSON])
    if path == "/users/alice/events/public":
        return httpx.Response(
            200,
            json=[_push("2024-06-15T11:30:00Z", 2), _push("2024-06-14T10:00:00Z", 5)],
        )
    if path == "/search/commits":
        return httpx.Response(200, json={"total_count": 10})
    if path == "/search/issues":
        return httpx.Response(200, json={"total_count": 2})
    return httpx.Response(404)


@pytest.fixture
def pipeline(tmp_path):
    pipeline = ProfilePipeline(data_dir=tmp_path, skip_llm=True)
    client = httpx.AsyncClient(transport=httpx.MockTransport(_handler))
    pipeline.github = GitHubFetcher(client=client, retry_delay=0)
    return pipeline


def test_recent_push_buffer(make_push, make_pr, now):
    events = [
        make_push(at=now - timedelta(minutes=10), size=3),
        make_push(at=now - timedelta(minutes=59), size=0),
        make_push(at=now - timedelta(minutes=61), size=7),
        make_pr(),
    ]
    assert recent_push_buffer(events, now) == 4


@pytest.mark.asyncio
async def test_analyze_profile(pipeline, tmp_path, now):
    report = await pipeline.analyze_profile("alice", now=now)

    assert report.username == "alice"
    assert report.total_lifetime_contributions == 10 + 2 + 2 + 2
    assert report.recent_contributions == 7
    assert report.ai_review == fallback_review(report)
    assert report.generated_at == now

    history = pipeline.history.read_history("alice")
    assert [(e.score, e.contributions) for e in history] == [(report.score, 7)]

    assert (tmp_path / "reports" / "alice.json").exists()
    assert pipeline.load_report("Alice") == report


@pytest.mark.asyncio
async def test_analyze_without_saving(pipeline, tmp_path, now):
    await pipeline.analyze_profile("alice", save=False, now=now)
    assert pipeline.load_report("alice") is None
    assert len(pipeline.history.read_history("alice")) == 1


@pytest.mark.asyncio
async def test_unknown_profile(pipeline, now):
    with pytest.raises(ProfileNotFoundError):
        await pipeline.analyze_profile("nobody", now=now)


@pytest.mark.asyncio
async def test_history_failure_does_not_break_run(pipeline, tmp_path, now):
    (tmp_path / "history").write_text("not a directory")
    report = await pipeline.analyze_profile("alice", now=now)
    assert report.username == "alice"
