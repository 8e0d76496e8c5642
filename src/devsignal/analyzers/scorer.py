"""Signal score calculator for developer profiles."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from devsignal.analyzers.activity import (
    calculate_consistency,
    calculate_contributions,
    rank_repositories,
)
from devsignal.analyzers.classifier import (
    calculate_language_breakdown,
    calculate_tech_stack,
    detect_role_fit,
)
from devsignal.analyzers.community import evaluate_community_health
from devsignal.analyzers.feedback import (
    calculate_potential_score,
    generate_repo_feedback,
    get_demo_repos,
    get_priority_fixes,
)
from devsignal.analyzers.normalizer import (
    SECONDS_PER_DAY,
    active_days,
    as_utc,
    events_of_type,
    half_up,
    is_active,
    is_external_pr,
    partition_repositories,
    repo_owner,
)
from devsignal.models.schemas import Account, Event, EventType, Report, Repository, Verdict

COMMIT_DISCIPLINE_STRENGTH = "Professional Commit Discipline"
DORMANCY_FLAG = "High dormancy (Critical inactivity)"

CONVENTIONAL_COMMIT = re.compile(
    r"^(feat|fix|docs|style|refactor|perf|test|build|ci|chore|working|revert)(\(.+\))?:"
)


@dataclass
class _ScoreSheet:
    """Running total plus the findings appended along the way."""

    score: float = 0.0
    strengths: list[str] = field(default_factory=list)
    red_flags: list[str] = field(default_factory=list)

    def award(self, points: float, strength: str | None = None) -> None:
        self.score += points
        if strength:
            self.strengths.append(strength)

    def flag(self, red_flag: str, penalty: float = 0.0) -> None:
        self.score -= penalty
        self.red_flags.append(red_flag)


class Scorer:
    """Calculates the 0-100 signal score from account, repositories and events.

    Point budget (each category capped internally, total clamped to 0-100):
    - Profile hygiene: ~20
    - Repository volume & quality: ~50
    - Activity & engagement: ~30
    - Technical rigor: ~25
    - Engineering depth: 15 (plus commit discipline and reliability bonuses)
    - Security penalty: up to -15
    - Structural penalties: -25 fork-only, -15 dormant
    """

    MAX_FINDINGS = 5
    ACTIVE_WINDOW_DAYS = 90

    RIGOR_LANGUAGES = {"rust", "c++", "c", "go", "haskell", "scala", "assembly"}
    SECURITY_RISK_KEYWORDS = [
        ".env", "credentials", "password", "id_rsa", "secret", "access_key", "token",
    ]

    DEPTH_CAP = 15
    SECURITY_PENALTY_CAP = 15
    FORK_ONLY_PENALTY = 25
    DORMANCY_PENALTY = 15

    def compute(
        self,
        account: Account,
        repositories: list[Repository],
        events: list[Event] | None = None,
        now: datetime | None = None,
    ) -> Report:
        """Score a profile and attach every derived sub-result.

        Args:
            account: Account snapshot.
            repositories: All repositories of the account, forks included.
            events: Public activity events, in any order.
            now: Observation instant; defaults to the current UTC time.

        Returns:
            A fresh Report.
        """
        events = events or []
        now = as_utc(now) if now else datetime.now(timezone.utc)
        original, forked = partition_repositories(repositories)
        sheet = _ScoreSheet()

        self._score_profile(sheet, account)
        total_stars = self._score_repositories(sheet, repositories, original)
        active_count = self._score_activity(sheet, account, repositories, events, now)
        self._score_rigor(sheet, original)
        self._score_depth(sheet, account, original, events)
        self._apply_structural_penalties(sheet, original, forked, active_count)

        score = max(0, min(half_up(sheet.score), 100))

        repo_feedback = generate_repo_feedback(repositories)
        showcased = {f.name for f in repo_feedback}
        priority_fixes = get_priority_fixes(repositories, showcased)

        return Report(
            username=account.login,
            score=score,
            verdict=Verdict.from_score(score),
            total_repos=account.public_repos,
            total_stars=total_stars,
            strengths=sheet.strengths[: self.MAX_FINDINGS],
            red_flags=sheet.red_flags[: self.MAX_FINDINGS],
            role_fit=detect_role_fit(repositories),
            priority_fixes=priority_fixes,
            potential_score=calculate_potential_score(score, len(priority_fixes)),
            language_breakdown=calculate_language_breakdown(repositories),
            tech_stack=calculate_tech_stack(repositories),
            community_health=evaluate_community_health(repositories, events),
            repo_feedback=repo_feedback,
            demo_repos=get_demo_repos(repositories),
            recent_contributions=calculate_contributions(events),
            consistency=calculate_consistency(events),
            all_repos=rank_repositories(repositories, events),
            generated_at=now,
        )

    def _score_profile(self, sheet: _ScoreSheet, account: Account) -> None:
        """Profile hygiene (~20 points)."""
        if account.bio:
            sheet.award(5, "Bio is present")
        else:
            sheet.flag("Missing bio")

        if account.location:
            sheet.award(2)
        if account.email:
            sheet.award(3, "Public email for recruiters")
        if account.blog:
            sheet.award(2, "Links to external portfolio/blog")

        # The >=50 tier is unreachable behind >=10; downstream scores depend on it.
        if account.followers >= 10:
            sheet.award(4, "Decent follower count (Social Proof)")
        elif account.followers >= 50:
            sheet.award(8, "Strong community influence")

        if account.public_repos >= 5:
            sheet.award(5)

    def _score_repositories(
        self,
        sheet: _ScoreSheet,
        repositories: list[Repository],
        original: list[Repository],
    ) -> int:
        """Repository volume and quality (~50 points). Returns original-repo star total."""
        sheet.award(min(len(repositories) * 2, 20))

        # 75% of repos described already earns the full 30 points
        described = sum(1 for r in repositories if r.description)
        ratio = described / len(repositories) if repositories else 0
        sheet.award(min(ratio * 40, 30))

        total_stars = sum(r.stars for r in original)

        if original:
            described_ratio = sum(1 for r in original if r.description) / len(original)
            with_homepage = sum(1 for r in original if r.homepage)
            topic_ratio = sum(1 for r in original if r.topics) / len(original)

            if described_ratio > 0.8:
                sheet.award(5, "Most repos have descriptions")
            elif described_ratio < 0.5:
                sheet.flag("Many repos lack descriptions")

            if with_homepage > 0:
                sheet.award(5, f"Live demos available ({with_homepage} repos)")
            if topic_ratio > 0.5:
                sheet.award(5)

        if total_stars > 5:
            sheet.award(5, f"Received {total_stars} stars across repos")

        return total_stars

    def _score_activity(
        self,
        sheet: _ScoreSheet,
        account: Account,
        repositories: list[Repository],
        events: list[Event],
        now: datetime,
    ) -> int:
        """Activity and engagement (~30 points). Returns the active repository count."""
        active_count = sum(1 for r in repositories if is_active(r, now, self.ACTIVE_WINDOW_DAYS))
        sheet.award(min(active_count * 5, 15))

        external_prs = sum(1 for e in events if is_external_pr(e, account.login))
        comments = len(
            events_of_type(events, EventType.ISSUE_COMMENT, EventType.PR_REVIEW_COMMENT)
        )

        if active_count == 0:
            sheet.flag("No recent activity (last 3 months)")
        else:
            sheet.strengths.append("Active contributor in recent months")

        if external_prs > 0:
            sheet.award(
                min(external_prs * 10, 20),
                f"Open Source Contributor ({external_prs} external PRs)",
            )

        if comments > 5:
            sheet.award(5, "Active community member (Helping others)")

        return active_count

    def _score_rigor(self, sheet: _ScoreSheet, original: list[Repository]) -> None:
        """Technical rigor and expertise (~25 points)."""
        language_counts: dict[str, int] = {}
        for repo in original:
            if repo.language:
                language_counts[repo.language] = language_counts.get(repo.language, 0) + 1

        if len(language_counts) >= 3:
            sheet.award(5, "Polyglot developer (3+ languages)")

        if any(r.language and r.language.lower() in self.RIGOR_LANGUAGES for r in original):
            sheet.award(5, "Technical Rigor (Proficient in systems/complex languages)")

        if language_counts and len(original) >= 3:
            top_language, top_count = sorted(language_counts.items(), key=lambda i: -i[1])[0]
            if top_count / len(original) > 0.6:
                sheet.award(3, f"Domain Expert in {top_language}")

        high_quality = [r for r in original if r.stars > 0 and r.description]
        if len(high_quality) >= 2:
            sheet.award(7, "Has high-quality/starred projects")

    def _score_depth(
        self,
        sheet: _ScoreSheet,
        account: Account,
        original: list[Repository],
        events: list[Event],
    ) -> None:
        """Engineering depth, commit discipline, reliability and security hygiene."""
        depth = 0.0
        security_penalty = 0

        if events_of_type(events, EventType.WORKFLOW_RUN, EventType.WORKFLOW_JOB):
            depth += 8
            sheet.strengths.append("DevOps/Automation Signal (Uses GitHub Actions)")

        for repo in original:
            name = repo.name.lower()
            desc = (repo.description or "").lower()
            if any(key in name or key in desc for key in self.SECURITY_RISK_KEYWORDS):
                security_penalty += 5
            depth += self._repository_depth(repo)

        # Likely-organization owners: short names without digits
        for event in events:
            if is_external_pr(event, account.login):
                owner = repo_owner(event)
                if len(owner) < 15 and not re.search(r"\d", owner):
                    depth += 2

        conventional = sum(
            1
            for e in events_of_type(events, EventType.PUSH)
            if e.payload.commits and CONVENTIONAL_COMMIT.match(e.payload.commits[0].message)
        )
        if conventional > 3:
            sheet.award(10, COMMIT_DISCIPLINE_STRENGTH)

        if len(active_days(events)) > 10:
            sheet.award(5, "High Contributor Reliability")

        sheet.award(min(depth, self.DEPTH_CAP))
        sheet.score -= min(security_penalty, self.SECURITY_PENALTY_CAP)
        if security_penalty > 0:
            sheet.red_flags.append("Security Hygiene: Detected possible secrets in public repos")

    def _repository_depth(self, repo: Repository) -> float:
        """Per-repository depth: documentation, impact density, tenure, structure."""
        depth = 0.0

        if repo.description and len(repo.description) > 80:
            depth += 1.5
        elif repo.description:
            depth += 0.5

        if repo.stars > 5 and repo.forks > 0 and repo.stars / repo.forks < 10:
            depth += 1.5

        if repo.created_at and repo.updated_at:
            tenure_seconds = (as_utc(repo.updated_at) - as_utc(repo.created_at)).total_seconds()
            tenure_months = tenure_seconds / (SECONDS_PER_DAY * 30)
            if tenure_months > 12:
                depth += 2
            elif tenure_months > 4:
                depth += 1

        if repo.has_wiki:
            depth += 0.5
        if repo.has_pages:
            depth += 0.5

        return depth

    def _apply_structural_penalties(
        self,
        sheet: _ScoreSheet,
        original: list[Repository],
        forked: list[Repository],
        active_count: int,
    ) -> None:
        if not original and forked:
            sheet.flag("Lack of original work (Fork-only profile)", self.FORK_ONLY_PENALTY)
        if active_count == 0:
            sheet.flag(DORMANCY_FLAG, self.DORMANCY_PENALTY)


def compute(
    account: Account,
    repositories: list[Repository],
    events: list[Event] | None = None,
    now: datetime | None = None,
) -> Report:
    """Score a profile with a default Scorer."""
    return Scorer().compute(account, repositories, events, now)
