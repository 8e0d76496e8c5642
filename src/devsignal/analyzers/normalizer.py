"""Input normalization shared by every analyzer."""

import math
from datetime import date, datetime, timezone

from devsignal.models.schemas import Event, EventType, Repository

SECONDS_PER_DAY = 60 * 60 * 24


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_date(value: datetime) -> date:
    """Calendar date of a timestamp, in UTC."""
    return as_utc(value).date()


def partition_repositories(
    repositories: list[Repository],
) -> tuple[list[Repository], list[Repository]]:
    """Split repositories into (original, forked), preserving order."""
    original = [r for r in repositories if not r.is_fork]
    forked = [r for r in repositories if r.is_fork]
    return original, forked


def events_of_type(events: list[Event], *types: EventType) -> list[Event]:
    """Filter events down to the given types."""
    wanted = {t.value for t in types}
    return [e for e in events if e.type in wanted]


def repo_owner(event: Event) -> str:
    """Owner segment of the event's repository name."""
    return event.repo_name.split("/")[0]


def short_repo_name(full_name: str) -> str:
    """Last path segment of an owner/repo name."""
    return full_name.split("/")[-1]


def days_since(value: datetime | None, now: datetime) -> float | None:
    """Fractional days between a timestamp and now, or None if absent."""
    if value is None:
        return None
    return (as_utc(now) - as_utc(value)).total_seconds() / SECONDS_PER_DAY


def is_active(repo: Repository, now: datetime, window_days: int = 90) -> bool:
    """Whether the repository was updated within the window."""
    age = days_since(repo.updated_at, now)
    return age is not None and age < window_days


def active_days(events: list[Event]) -> set[date]:
    """Distinct UTC calendar days with at least one event."""
    return {utc_date(e.created_at) for e in events}


def is_external_pr(event: Event, login: str) -> bool:
    """An opened pull request against a repository the account does not own."""
    if event.type != EventType.PULL_REQUEST.value or event.payload.action != "opened":
        return False
    owner = repo_owner(event)
    return bool(owner) and owner.lower() != login.lower()


def half_up(value: float) -> int:
    """Round half up (toward positive infinity), unlike round()'s banker's rounding."""
    return math.floor(value + 0.5)
