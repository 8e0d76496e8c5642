"""Data models and schemas."""

from devsignal.models.schemas import (
    Account,
    Event,
    EventType,
    Report,
    Repository,
    Verdict,
)

__all__ = ["Account", "Repository", "Event", "EventType", "Report", "Verdict"]
