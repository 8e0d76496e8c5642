"""Pydantic models for profile data and scoring reports."""

from datetime import date as Date
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Activity event types consumed by the engine.

    Values match the raw event type names of the hosting API so that
    string lengths (used by the timeline variety index) stay stable.
    """

    PUSH = "PushEvent"
    PULL_REQUEST = "PullRequestEvent"
    ISSUES = "IssuesEvent"
    ISSUE_COMMENT = "IssueCommentEvent"
    PR_REVIEW_COMMENT = "PullRequestReviewCommentEvent"
    WORKFLOW_RUN = "WorkflowRunEvent"
    WORKFLOW_JOB = "WorkflowJobEvent"
    CREATE = "CreateEvent"


class Verdict(str, Enum):
    """Qualitative verdict tiers, highest first."""

    WORLD_CLASS = "World-Class Engineer"
    INDUSTRY_AUTHORITY = "Industry Authority"
    LEAD_GRADE = "Lead-Grade Potential"
    SOLID = "Solid Developer"
    ASPIRING = "Aspiring Talent"
    GHOST_TOWN = "Ghost Town"

    @classmethod
    def from_score(cls, score: int) -> "Verdict":
        """Map a 0-100 score onto its tier."""
        if score >= 97:
            return cls.WORLD_CLASS
        elif score >= 88:
            return cls.INDUSTRY_AUTHORITY
        elif score >= 75:
            return cls.LEAD_GRADE
        elif score >= 55:
            return cls.SOLID
        elif score >= 30:
            return cls.ASPIRING
        else:
            return cls.GHOST_TOWN


class Grade(str, Enum):
    """Per-repository feedback grades."""

    A_PLUS = "A+"
    B = "B"
    C_PLUS = "C+"
    D = "D"


# --- Input records ---


class Account(BaseModel):
    """Public account metadata."""

    login: str
    bio: str | None = None
    location: str | None = None
    email: str | None = None
    blog: str | None = None
    followers: int = 0
    public_repos: int = 0


class Repository(BaseModel):
    """A repository owned by the account."""

    name: str
    full_name: str | None = None  # owner/name, when the ingestion source knows it
    html_url: str = ""
    description: str | None = None
    homepage: str | None = None
    is_fork: bool = False
    language: str | None = None
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    topics: list[str] = Field(default_factory=list)
    size: int = 0  # KB
    has_wiki: bool = False
    has_pages: bool = False
    license: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    default_branch: str = "main"


class Commit(BaseModel):
    """A commit carried by a push event."""

    sha: str | None = None
    message: str = ""


class PullRequestInfo(BaseModel):
    """Pull request details carried by a pull request event."""

    title: str | None = None
    merged: bool = False


class EventPayload(BaseModel):
    """Type-specific event payload. Fields absent for a type stay at defaults."""

    action: str | None = None
    size: int | None = None
    commits: list[Commit] = Field(default_factory=list)
    pull_request: PullRequestInfo | None = None
    ref: str | None = None
    ref_type: str | None = None


class Event(BaseModel):
    """A public activity event."""

    type: str
    created_at: datetime
    repo_name: str = "unknown/repo"  # owner/repo
    payload: EventPayload = Field(default_factory=EventPayload)


# --- Report sub-results ---


class TechSkill(BaseModel):
    """A technology inventory entry."""

    name: str
    count: int


class LanguageShare(BaseModel):
    """Share of repositories written in one primary language."""

    language: str
    count: int
    percentage: int


class CommunityHealth(BaseModel):
    """Community vitality aggregates over original repositories."""

    license_count: int = 0
    total_repos: int = 0
    total_forks: int = 0
    open_issues: int = 0
    avg_activity: float = 0.0
    health_score: int = Field(default=0, ge=0, le=100)


class RepoFeedback(BaseModel):
    """Grade and improvement tip for a showcased repository."""

    name: str
    url: str
    language: str
    stars: int
    forks: int
    grade: Grade
    tip: str


class PriorityFix(BaseModel):
    """Highest-leverage remediation action for one repository."""

    name: str
    issues: list[str] = Field(default_factory=list)


class DemoRepo(BaseModel):
    """A repository with something to click on."""

    name: str
    url: str
    demo: str
    desc: str
    host: str


class RepoActivity(BaseModel):
    """A repository with its derived activity score."""

    name: str
    url: str
    language: str
    stars: int
    forks: int
    size: int
    recent_commits: int
    updated_at: datetime | None = None
    description: str
    is_fork: bool
    activity_score: float


class Report(BaseModel):
    """Complete scoring report for one account."""

    username: str
    score: int = Field(ge=0, le=100)
    verdict: Verdict
    total_repos: int = 0
    total_stars: int = 0
    strengths: list[str] = Field(default_factory=list, max_length=5)
    red_flags: list[str] = Field(default_factory=list, max_length=5)
    role_fit: str
    priority_fixes: list[PriorityFix] = Field(default_factory=list, max_length=5)
    potential_score: int = Field(ge=0, le=100)
    language_breakdown: list[LanguageShare] = Field(default_factory=list)
    tech_stack: list[TechSkill] = Field(default_factory=list, max_length=18)
    community_health: CommunityHealth = Field(default_factory=CommunityHealth)
    repo_feedback: list[RepoFeedback] = Field(default_factory=list, max_length=5)
    demo_repos: list[DemoRepo] = Field(default_factory=list)
    recent_contributions: int = 0
    consistency: str = "Dormant"
    all_repos: list[RepoActivity] = Field(default_factory=list)
    total_lifetime_contributions: int | None = None
    ai_review: str | None = None
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# --- Shadow benchmark ---


class Benchmark(BaseModel):
    """One benchmark category compared against a top-tier reference."""

    category: str
    score: int
    top_tier: int
    gap: str


class GrowthTarget(BaseModel):
    """Static strategic growth target."""

    title: str
    desc: str


class PersonaDetails(BaseModel):
    """Narrative details for the shadow persona."""

    desc: str
    traits: list[str] = Field(default_factory=list)


class ShadowProfile(BaseModel):
    """Shadow benchmark result."""

    benchmarks: list[Benchmark]
    growth_targets: list[GrowthTarget]
    persona: str
    persona_details: PersonaDetails


# --- Impact timeline ---


class ImpactDay(BaseModel):
    """Classification of a single calendar day."""

    date: Date
    level: int = Field(default=0, ge=0, le=5)
    type: str = "idle"
    summary: str = "No telemetry detected."
    repos: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)


class ImpactTimeline(BaseModel):
    """Fixed-window impact timeline, newest day first."""

    impact_days: list[ImpactDay]
    top_achievement: str


# --- Revival plans ---


class RevivalPlan(BaseModel):
    """Improvement mission for a dormant repository."""

    repo: str
    why: str
    tasks: list[str]
    bonus: str
    mission_name: str | None = None


# --- History ---


class HistoryEntry(BaseModel):
    """One persisted score observation."""

    score: int
    contributions: int = 0
    timestamp: datetime


# --- Recruiter chat ---


class ChatMessage(BaseModel):
    """One turn of a recruiter chat."""

    role: str  # "user" or "assistant"
    content: str


# --- Repository X-ray ---


class RepoTreeEntry(BaseModel):
    """One path in a repository's git tree."""

    path: str
    type: str  # "tree" (folder) or "blob" (file)
    size: int | None = None

    @property
    def is_folder(self) -> bool:
        return self.type == "tree"
