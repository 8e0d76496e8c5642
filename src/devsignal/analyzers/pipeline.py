"""End-to-end analysis pipeline for developer profiles."""

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import httpx

from devsignal.analyzers.github import GitHubFetcher
from devsignal.analyzers.llm import ReviewWriter, fallback_review
from devsignal.analyzers.normalizer import as_utc, events_of_type
from devsignal.analyzers.scorer import Scorer
from devsignal.models.schemas import Event, EventType, Report
from devsignal.storage.history import ScoreHistory

logger = logging.getLogger(__name__)

PUSH_BUFFER_SECONDS = 3600


def recent_push_buffer(events: list[Event], now: datetime) -> int:
    """Commits pushed in the last hour.

    The search API lags behind the event feed, so these are added on top of
    the lifetime contribution count.
    """
    return sum(
        e.payload.size or 1
        for e in events_of_type(events, EventType.PUSH)
        if (now - as_utc(e.created_at)).total_seconds() < PUSH_BUFFER_SECONDS
    )


class ProfilePipeline:
    """Orchestrates the full analysis of one account.

    Pipeline stages:
    1. Fetch account, repositories, events and lifetime contributions
    2. Calculate score and derived sub-results
    3. Write the recruiter review (templated fallback if Ollama is down)
    4. Record the score in history
    5. Save results
    """

    def __init__(
        self,
        data_dir: Path | None = None,
        github_token: str | None = None,
        llm_model: str | None = None,
        skip_llm: bool = False,
    ) -> None:
        """Initialize the pipeline.

        Args:
            data_dir: Directory for history and saved reports. Defaults to ./data.
            github_token: GitHub personal access token.
            llm_model: Ollama model for the recruiter review.
            skip_llm: Always use the templated review.
        """
        self.data_dir = data_dir or Path("data")
        self.github_token = github_token
        self.llm_model = llm_model
        self.skip_llm = skip_llm
        self.github = GitHubFetcher(token=github_token)
        self.writer = ReviewWriter(model=llm_model) if not skip_llm else None
        self.scorer = Scorer()
        self.history = ScoreHistory(self.data_dir)
        self._http_client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "ProfilePipeline":
        """Set up shared HTTP client."""
        self._http_client = httpx.AsyncClient(timeout=60.0)
        self.github = GitHubFetcher(token=self.github_token, client=self._http_client)
        if self.writer is not None:
            self.writer = ReviewWriter(model=self.llm_model, client=self._http_client)
        return self

    async def __aexit__(self, *args) -> None:
        """Clean up HTTP client."""
        if self._http_client:
            await self._http_client.aclose()

    async def analyze_profile(
        self,
        login: str,
        save: bool = True,
        now: datetime | None = None,
    ) -> Report:
        """Run full analysis on a single account.

        Args:
            login: Account login.
            save: Whether to save the report to disk.
            now: Observation instant; defaults to the current UTC time.

        Returns:
            Complete Report, including lifetime contributions and AI review.

        Raises:
            ProfileNotFoundError: If the account does not exist.
            httpx.HTTPError: If account or repository fetches fail.
        """
        now = as_utc(now) if now else datetime.now(timezone.utc)
        logger.info(f"Analyzing {login}...")

        # Stage 1: Fetch
        account, repositories, events, lifetime = await asyncio.gather(
            self.github.fetch_account(login),
            self.github.fetch_repositories(login),
            self.github.fetch_events(login),
            self.github.fetch_total_contributions(login),
        )

        # Stage 2: Score
        report = self.scorer.compute(account, repositories, events, now)
        report.total_lifetime_contributions = lifetime + recent_push_buffer(events, now)

        # Stage 3: Review
        if self.writer is not None:
            report.ai_review = await self.writer.review_or_fallback(report)
        else:
            report.ai_review = fallback_review(report)

        # Stage 4: History
        try:
            self.history.append(login, report.score, report.recent_contributions, now)
        except OSError as e:
            logger.error(f"Failed to save score for {login}: {e}")

        # Stage 5: Save
        if save:
            path = self._save_report(report)
            logger.info(f"Saved report to {path}")

        return report

    def _save_report(self, report: Report) -> Path:
        """Save report to disk.

        Returns:
            Path to saved file.
        """
        reports_dir = self.data_dir / "reports"
        reports_dir.mkdir(parents=True, exist_ok=True)

        filepath = reports_dir / f"{report.username.lower()}.json"
        data = report.model_dump(mode="json")
        filepath.write_text(json.dumps(data, indent=2, default=str))

        return filepath

    def load_report(self, login: str) -> Report | None:
        """Load a previously saved report, or None if there is none."""
        filepath = self.data_dir / "reports" / f"{login.lower()}.json"
        if not filepath.exists():
            return None
        return Report.model_validate_json(filepath.read_text())
