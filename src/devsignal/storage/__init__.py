"""Local persistence for score history."""

from devsignal.storage.history import ScoreHistory

__all__ = ["ScoreHistory"]
