"""Tests for the day-by-day impact timeline."""

from datetime import date, datetime, timedelta, timezone

import pytest

from devsignal.analyzers.timeline import ACHIEVEMENTS, WINDOW_DAYS, classify
from devsignal.models.schemas import Event, EventPayload

JAN_15 = datetime(2024, 1, 15, 18, 0, tzinfo=timezone.utc)


def _day(timeline, day):
    return next(d for d in timeline.impact_days if d.date == day)


def test_empty_window(now):
    timeline = classify([], now)
    assert len(timeline.impact_days) == WINDOW_DAYS
    assert timeline.impact_days[0].date == now.date()
    assert timeline.impact_days[-1].date == now.date() - timedelta(days=WINDOW_DAYS - 1)
    assert all(d.level == 0 and d.type == "idle" for d in timeline.impact_days)
    assert timeline.impact_days[0].summary == "No telemetry detected."
    assert timeline.top_achievement == ACHIEVEMENTS[0]


def test_days_are_contiguous_and_descending(now, make_push):
    timeline = classify([make_push(days_ago=3), make_push(days_ago=40)], now)
    dates = [d.date for d in timeline.impact_days]
    assert all(a - b == timedelta(days=1) for a, b in zip(dates, dates[1:]))


def test_feature_push(make_push):
    push = make_push(
        at=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc),
        messages=("feat: add cache\n\nLonger body text.",),
        repo="alice/cache-service",
    )
    day = _day(classify([push], JAN_15), date(2024, 1, 1))
    assert day.level == 3
    assert day.type == "feature"
    assert day.highlights == ["feat: add cache"]
    assert day.repos == ["cache-service"]
    assert "cache-service" in day.summary

    neighbours = [_day(classify([push], JAN_15), date(2024, 1, d)) for d in (2, 3)]
    assert all(d.level == 0 for d in neighbours)


def test_routine_push_without_commits(make_push, now):
    push = make_push(messages=(), size=4, repo="alice/notes")
    day = classify([push], now).impact_days[0]
    assert day.level == 2
    assert day.type == "routine"
    assert len(day.highlights) == 1


def test_commit_highlights_capped_at_three(make_push, now):
    push = make_push(messages=("a", "b", "c", "d"))
    assert classify([push], now).impact_days[0].highlights == ["a", "b", "c"]


def test_highlights_deduplicated_and_capped(make_push, now):
    pushes = [make_push(messages=("same", "same")), make_push(messages=("x", "y", "z"))]
    pushes.append(make_push(messages=("w", "v")))
    highlights = classify(pushes, now).impact_days[0].highlights
    assert highlights == ["same", "x", "y", "z", "w"]


@pytest.mark.parametrize(
    "action, merged, level, prefix",
    [
        ("closed", True, 4, "Merged Architectural PR: "),
        ("opened", False, 3, "Proposed System Refinement: "),
        ("closed", False, 3, "Proposed System Refinement: "),
    ],
)
def test_pull_requests(make_pr, now, action, merged, level, prefix):
    day = classify([make_pr(action=action, merged=merged, title="Cache layer")], now).impact_days[0]
    assert day.level == level
    assert day.type == "refactor"
    assert day.summary == f"{prefix}Cache layer"


def test_untitled_pull_request(now):
    pr = Event(type="PullRequestEvent", created_at=now, payload=EventPayload(action="opened"))
    assert classify([pr], now).impact_days[0].summary == "Proposed System Refinement: Untitled change"


def test_architecture_events(now):
    create = Event(
        type="CreateEvent",
        created_at=now,
        repo_name="alice/engine",
        payload=EventPayload(ref="feature/x", ref_type="branch"),
    )
    day = classify([create], now).impact_days[0]
    assert day.level == 5
    assert day.type == "architecture"
    assert day.summary == "Initializing High-Fidelity Entity: feature/x in engine"

    workflow = Event(type="WorkflowRunEvent", created_at=now, repo_name="alice/engine")
    assert classify([workflow], now).impact_days[0].summary == "Systems Automation Logic on engine"


def test_push_never_lowers_level(make_pr, make_push, now):
    day = classify([make_pr(action="closed", merged=True), make_push()], now).impact_days[0]
    assert day.level == 4


def test_multi_repo_orchestration(make_push, now):
    pushes = [make_push(repo=f"alice/repo{i}") for i in range(3)]
    day = classify(pushes, now).impact_days[0]
    assert day.summary == "Full-Stack Orchestration: 3 systems synchronized"


def test_events_outside_window_are_ignored(make_push, now):
    timeline = classify([make_push(days_ago=WINDOW_DAYS), make_push(days_ago=-1)], now)
    assert all(d.level == 0 for d in timeline.impact_days)
    assert timeline.top_achievement == ACHIEVEMENTS[2]


def test_deterministic(make_push, make_pr, now):
    events = [make_push(days_ago=d % 7, repo=f"alice/r{d}") for d in range(12)] + [make_pr()]
    assert classify(events, now) == classify(events, now)
