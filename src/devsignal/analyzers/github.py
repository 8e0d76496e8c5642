"""GitHub data fetcher for profile analysis."""

import asyncio
import logging
import os
from datetime import datetime, timezone
from typing import Any

import httpx

from devsignal.models.schemas import (
    Account,
    Commit,
    Event,
    EventPayload,
    PullRequestInfo,
    RepoTreeEntry,
    Repository,
)

logger = logging.getLogger(__name__)


class ProfileNotFoundError(Exception):
    """Raised when an account cannot be found."""

    def __init__(self, login: str) -> None:
        self.login = login
        super().__init__(f"GitHub account '{login}' not found")


def parse_account(data: dict[str, Any]) -> Account:
    """Map a raw /users/{login} payload onto an Account."""
    return Account(
        login=data["login"],
        bio=data.get("bio"),
        location=data.get("location"),
        email=data.get("email"),
        blog=data.get("blog") or None,
        followers=data.get("followers") or 0,
        public_repos=data.get("public_repos") or 0,
    )


def parse_repository(data: dict[str, Any]) -> Repository:
    """Map a raw repository payload onto a Repository."""
    license_info = data.get("license") or {}
    return Repository(
        name=data["name"],
        full_name=data.get("full_name"),
        html_url=data.get("html_url") or "",
        description=data.get("description"),
        homepage=data.get("homepage") or None,
        is_fork=data.get("fork", False),
        language=data.get("language"),
        stars=data.get("stargazers_count") or 0,
        forks=data.get("forks_count") or 0,
        open_issues=data.get("open_issues_count") or 0,
        topics=data.get("topics") or [],
        size=data.get("size") or 0,
        has_wiki=data.get("has_wiki", False),
        has_pages=data.get("has_pages", False),
        license=license_info.get("spdx_id") or license_info.get("name"),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
        default_branch=data.get("default_branch") or "main",
    )


def parse_event(data: dict[str, Any]) -> Event:
    """Map a raw public event payload onto an Event."""
    raw = data.get("payload") or {}
    pr = raw.get("pull_request")
    payload = EventPayload(
        action=raw.get("action"),
        size=raw.get("size"),
        commits=[
            Commit(sha=c.get("sha"), message=c.get("message") or "")
            for c in raw.get("commits") or []
        ],
        pull_request=PullRequestInfo(title=pr.get("title"), merged=bool(pr.get("merged"))) if pr else None,
        ref=raw.get("ref"),
        ref_type=raw.get("ref_type"),
    )
    return Event(
        type=data.get("type") or "UnknownEvent",
        created_at=data["created_at"],
        repo_name=(data.get("repo") or {}).get("name") or "unknown/repo",
        payload=payload,
    )


class GitHubFetcher:
    """Fetches account, repository and event data from the GitHub API.

    Set GITHUB_TOKEN environment variable or pass token to constructor
    for higher rate limits.
    """

    BASE_URL = "https://api.github.com"
    MAX_ATTEMPTS = 3

    def __init__(
        self,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        retry_delay: float = 1.0,
    ) -> None:
        """Initialize the fetcher.

        Args:
            token: GitHub personal access token. If not provided, uses GITHUB_TOKEN env var.
            client: Optional httpx client. If not provided, a new client is created per call.
            retry_delay: Base delay in seconds between timeout retries.
        """
        self._token = token or os.environ.get("GITHUB_TOKEN")
        self._client = client
        self.retry_delay = retry_delay

        # Rate limit tracking
        self.rate_limit_remaining: int = 5000
        self.rate_limit_reset: datetime | None = None

    def _headers(self) -> dict[str, str]:
        """Get headers for GitHub API requests."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=30.0, headers=self._headers())

    def _update_rate_limits(self, response: httpx.Response) -> None:
        """Extract and store rate limit info from response headers."""
        remaining = response.headers.get("X-RateLimit-Remaining")
        reset = response.headers.get("X-RateLimit-Reset")

        if remaining is not None:
            self.rate_limit_remaining = int(remaining)
        if reset is not None:
            self.rate_limit_reset = datetime.fromtimestamp(int(reset), tz=timezone.utc)

    async def _fetch(self, path: str, params: dict | None = None) -> dict | list | None:
        """Fetch from GitHub API, retrying timeouts with linear backoff.

        Returns None if 404, raises on other errors.
        """
        client = await self._get_client()
        url = f"{self.BASE_URL}{path}"

        try:
            for attempt in range(1, self.MAX_ATTEMPTS + 1):
                try:
                    response = await client.get(url, params=params, headers=self._headers())
                except httpx.TimeoutException:
                    if attempt == self.MAX_ATTEMPTS:
                        raise
                    logger.warning(
                        f"GitHub API timeout on {path}. Retrying ({attempt}/{self.MAX_ATTEMPTS})..."
                    )
                    await asyncio.sleep(self.retry_delay * attempt)
                    continue

                self._update_rate_limits(response)
                if response.status_code == 404:
                    return None
                response.raise_for_status()
                return response.json()
            return None
        finally:
            if self._client is None:
                await client.aclose()

    async def fetch_account(self, login: str) -> Account:
        """Fetch account metadata.

        Raises:
            ProfileNotFoundError: If the account does not exist.
        """
        data = await self._fetch(f"/users/{login}")
        if data is None:
            raise ProfileNotFoundError(login)
        return parse_account(data)

    async def fetch_repositories(self, login: str) -> list[Repository]:
        """Fetch up to 100 public repositories of the account."""
        data = await self._fetch(f"/users/{login}/repos", {"per_page": 100})
        return [parse_repository(r) for r in data or []]

    async def fetch_events(self, login: str) -> list[Event]:
        """Fetch up to 100 recent public events. Failures degrade to an empty list."""
        try:
            data = await self._fetch(f"/users/{login}/events/public", {"per_page": 100})
        except httpx.HTTPError as e:
            logger.warning(f"Error fetching events for {login}: {e}")
            return []
        return [parse_event(e) for e in data or []]

    async def fetch_total_contributions(self, login: str) -> int:
        """Lifetime commits + issues + pull requests from the search API.

        Each failed search counts as zero.
        """
        queries = [
            ("Commits", "/search/commits", f"author:{login}"),
            ("Issues", "/search/issues", f"author:{login} type:issue"),
            ("PRs", "/search/issues", f"author:{login} type:pr"),
        ]
        results = await asyncio.gather(
            *(self._fetch(path, {"q": q}) for _, path, q in queries),
            return_exceptions=True,
        )

        total = 0
        for (label, _, _), result in zip(queries, results):
            if isinstance(result, Exception):
                logger.warning(f"{label} search failed for {login}: {result}")
                continue
            count = (result or {}).get("total_count") or 0
            logger.debug(f"{label}: {count}")
            total += count
        return total

    async def fetch_repo_tree(self, owner: str, repo: str) -> list[RepoTreeEntry]:
        """Fetch the recursive file tree of a repository's default branch.

        Entries are sorted folders first, then by path. Any failure, including
        an unknown repository, degrades to an empty list.
        """
        try:
            info = await self._fetch(f"/repos/{owner}/{repo}")
            if info is None:
                logger.warning(f"Repository {owner}/{repo} not found")
                return []
            branch = info.get("default_branch") or "main"
            data = await self._fetch(f"/repos/{owner}/{repo}/git/trees/{branch}", {"recursive": 1})
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Error fetching tree for {owner}/{repo}: {e}")
            return []

        if (data or {}).get("truncated"):
            logger.info(f"Tree for {owner}/{repo} was truncated by GitHub")
        entries = [
            RepoTreeEntry(path=item["path"], type=item.get("type") or "blob", size=item.get("size"))
            for item in (data or {}).get("tree") or []
        ]
        return sorted(entries, key=lambda e: (not e.is_folder, e.path))
