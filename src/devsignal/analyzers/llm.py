"""Recruiter-style narrative generation using Ollama."""

import json
import logging
import os
from typing import Any

import httpx

from devsignal.analyzers.scorer import COMMIT_DISCIPLINE_STRENGTH
from devsignal.models.schemas import ChatMessage, Report

logger = logging.getLogger(__name__)

REVIEW_CONTEXT_REPOS = 10
CHAT_CONTEXT_REPOS = 5

REVIEW_SYSTEM = (
    "You are the CTO of a Tier-1 Tech Firm and a Lead Recruiter at a top AI Lab. "
    "You write brutal, professional recruiter memos in markdown."
)

CHAT_INSTRUCTIONS = """INSTRUCTIONS:
- Be professional, sharp, and slightly challenging.
- Ask specific questions about their projects/repos.
- Don't be generic; use the candidate's real GitHub telemetry.
- Keep responses concise (under 3 sentences).
- If they answer well, acknowledge it. If they are vague, push for architectural details."""


def build_review_prompt(report: Report) -> str:
    """Build the audit prompt: score, tech stack, recent volume and top repositories."""
    data = {
        "score": report.score,
        "tech": [skill.model_dump() for skill in report.tech_stack],
        "recent": report.recent_contributions,
    }
    repo_lines = "\n".join(
        f"- {r.name}: {r.description} ({r.size / 1024:.1f}MB, {r.language}, {r.stars} stars)"
        for r in report.all_repos[:REVIEW_CONTEXT_REPOS]
    )
    return f"""SUBJECT: Comprehensive Technical Audit for Developer "{report.username}".
Data: {json.dumps(data)}
Repos:
{repo_lines}
Generate a brutal, professional recruiter's memo in markdown."""


def fallback_review(report: Report) -> str:
    """Templated memo used when the model cannot be reached."""
    top_three = ", ".join(skill.name for skill in report.tech_stack[:3]) or "core"
    lead = report.tech_stack[0].name if report.tech_stack else "core"
    discipline = (
        "standardized commit patterns"
        if COMMIT_DISCIPLINE_STRENGTH in report.strengths
        else "clean repository structure"
    )
    return f"""### AI Recruiter Verdict: Technical Audit (High-Reliability Mode)

**Score Performance: {report.score}/100**

#### Engineering Depth Signals
- **Architectural Footprint**: Detected high complexity in {top_three} core modules.
- **Production Readiness**: Exhibits Staff-level system ownership through {discipline}.
- **Evolutionary Potential**: The current signal aligns with Tier-1 engineering standards for a {report.verdict.value}.

#### Strategic Growth Roadmap
- Continue scaling technical volume in {lead} projects.
- Adopt higher-fidelity documentation patterns for mature repositories.

*Audit performed by local Technical Engine due to API latency.*
"""


def fallback_chat_reply(messages: list[ChatMessage], report: Report) -> str:
    """Deterministic recruiter answer for when no model is available."""
    last = messages[-1].content.lower() if messages else ""
    if "hello" in last or "hi" in last:
        tech = report.tech_stack[0].name if report.tech_stack else "modern tech"
        project = report.all_repos[0].name if report.all_repos else "your main project"
        return (
            f"Hello! I've been looking over your GitHub profile. Your work in {tech} caught my eye. "
            f"What was the most challenging architectural decision you made in {project}?"
        )
    return (
        "That's an interesting perspective. How did you handle scalability and state management "
        "in that specific implementation? I'm looking for Staff-level insight."
    )


class ReviewWriter:
    """Writes recruiter memos and chat replies with a local Ollama model.

    Every public method has a deterministic fallback, so callers always get
    text back even when Ollama is down.
    """

    def __init__(
        self,
        model: str | None = None,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the writer.

        Args:
            model: Ollama model name. Defaults to DEVSIGNAL_LLM_MODEL or llama3.1:8b.
            base_url: Ollama server URL. Defaults to OLLAMA_URL or localhost.
            client: Optional httpx client.
        """
        self.model = model or os.environ.get("DEVSIGNAL_LLM_MODEL", "llama3.1:8b")
        self.base_url = (base_url or os.environ.get("OLLAMA_URL", "http://localhost:11434")).rstrip("/")
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create an HTTP client."""
        if self._client is not None:
            return self._client
        return httpx.AsyncClient(timeout=300.0)  # LLM can be slow

    async def _generate(self, prompt: str, system: str | None = None) -> str:
        """Generate a response from the LLM.

        Raises:
            httpx.HTTPError: If Ollama is unreachable or returns an error status.
            ValueError: If the response body is not JSON.
        """
        client = await self._get_client()

        payload: dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {"temperature": 0.7},
        }
        if system:
            payload["system"] = system

        try:
            response = await client.post(f"{self.base_url}/api/generate", json=payload)
            response.raise_for_status()
            return response.json().get("response", "")
        finally:
            if self._client is None:
                await client.aclose()

    async def is_available(self) -> bool:
        """Check if Ollama is running and the model is pulled."""
        client = await self._get_client()
        try:
            response = await client.get(f"{self.base_url}/api/tags")
            if response.status_code != 200:
                return False
            names = [m.get("name", "") for m in response.json().get("models", [])]
            return any(self.model in name for name in names)
        except (httpx.HTTPError, ValueError):
            return False
        finally:
            if self._client is None:
                await client.aclose()

    async def write_review(self, report: Report) -> str:
        """Ask the model for a recruiter memo.

        Raises:
            httpx.HTTPError: On transport or status errors.
            ValueError: On a non-JSON response body. Callers fall back to
                fallback_review() for both.
        """
        logger.info(f"Requesting review for {report.username} from {self.model}")
        text = await self._generate(build_review_prompt(report), system=REVIEW_SYSTEM)
        return text.strip() or fallback_review(report)

    async def review_or_fallback(self, report: Report) -> str:
        """write_review() that degrades to the templated memo."""
        try:
            return await self.write_review(report)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"AI review failed for {report.username}: {e}")
            return fallback_review(report)

    async def chat_reply(self, username: str, messages: list[ChatMessage], report: Report) -> str:
        """Continue a technical interview about the candidate's repositories."""
        if not await self.is_available():
            return fallback_chat_reply(messages, report)

        repo_context = "\n".join(
            f"- {r.name}: {r.description} ({r.language}, {r.stars} stars)"
            for r in report.all_repos[:CHAT_CONTEXT_REPOS]
        )
        system = f"""ROLE: You are the Lead Technical Recruiter at a Tier-1 silicon valley firm.
SUBJECT: Technical Audit Interview for candidate "{username}".
CORE DATA:
- Score: {report.score}/100
- Role Fit: {report.role_fit}
- Top Repos:
{repo_context}

{CHAT_INSTRUCTIONS}"""
        history = "\n".join(
            f"{'Candidate' if m.role == 'user' else 'Recruiter'}: {m.content}" for m in messages
        )

        try:
            return await self._generate(f"Chat History:\n{history}\n\nRecruiter:", system=system)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Chat generation failed for {username}: {e}")
            project = report.all_repos[0].name if report.all_repos else "latest project"
            return (
                "Sorry, my technical assessment engine is experiencing latency. "
                f"Let's focus on your {project}. Can you explain the structural logic there?"
            )
