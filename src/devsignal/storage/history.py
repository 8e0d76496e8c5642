"""Append-only score history, one JSON-lines file per subject."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from devsignal.models.schemas import HistoryEntry

logger = logging.getLogger(__name__)


class ScoreHistory:
    """Score observations stored under <data_dir>/history/<subject>.jsonl.

    Subjects are lower-cased so lookups are case-insensitive.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)
        self.history_dir = self.data_dir / "history"

    def _path(self, subject: str) -> Path:
        return self.history_dir / f"{subject.lower()}.jsonl"

    def append(
        self,
        subject: str,
        score: int,
        contributions: int = 0,
        timestamp: datetime | None = None,
    ) -> HistoryEntry:
        """Record one observation and return it."""
        entry = HistoryEntry(
            score=score,
            contributions=contributions,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        if entry.timestamp.tzinfo is None:
            entry.timestamp = entry.timestamp.replace(tzinfo=timezone.utc)
        self.history_dir.mkdir(parents=True, exist_ok=True)
        with self._path(subject).open("a", encoding="utf-8") as f:
            f.write(entry.model_dump_json() + "\n")
        logger.debug(f"Recorded score {score} for {subject}")
        return entry

    def read_history(self, subject: str) -> list[HistoryEntry]:
        """All observations for a subject, oldest first. Unknown subjects yield []."""
        path = self._path(subject)
        if not path.exists():
            return []

        entries = [
            HistoryEntry.model_validate_json(line)
            for line in path.read_text(encoding="utf-8").splitlines()
            if line.strip()
        ]
        return sorted(entries, key=lambda e: e.timestamp)
