"""Tests for the signal score calculator."""

from datetime import timedelta

from devsignal.analyzers.scorer import (
    COMMIT_DISCIPLINE_STRENGTH,
    DORMANCY_FLAG,
    Scorer,
    compute,
)
from devsignal.models.schemas import Account, Event, EventPayload, Verdict


class TestEmptyProfile:
    def test_floor_score_and_lowest_tier(self, empty_account, now):
        report = compute(empty_account, [], [], now)
        assert report.score == 0
        assert report.verdict == Verdict.GHOST_TOWN
        assert report.potential_score == 0

    def test_red_flags(self, empty_account, now):
        report = compute(empty_account, [], [], now)
        assert report.red_flags == [
            "Missing bio",
            "No recent activity (last 3 months)",
            DORMANCY_FLAG,
        ]
        assert report.strengths == []

    def test_empty_sub_results(self, empty_account, now):
        report = compute(empty_account, [], None, now)
        assert report.role_fit == "Generalist Developer"
        assert report.consistency == "Dormant"
        assert report.tech_stack == []
        assert report.all_repos == []
        assert report.community_health.health_score == 0
        assert report.generated_at == now


class TestShowcaseProfile:
    def test_score_and_verdict(self, showcase_account, showcase_repo, conventional_pushes, now):
        report = compute(showcase_account, [showcase_repo], conventional_pushes, now)
        assert report.score == 80
        assert report.verdict == Verdict.LEAD_GRADE
        assert report.red_flags == []

    def test_awards_documentation_demo_and_stars(
        self, showcase_account, showcase_repo, conventional_pushes, now
    ):
        report = compute(showcase_account, [showcase_repo], conventional_pushes, now)
        assert "Most repos have descriptions" in report.strengths
        assert "Live demos available (1 repos)" in report.strengths
        assert "Received 10 stars across repos" in report.strengths

    def test_commit_discipline_bonus(self, showcase_account, showcase_repo, make_push, now):
        conventional = [
            make_push(days_ago=d, messages=(f"fix(core): patch {d}",), repo="alice/cache-service")
            for d in range(11)
        ]
        plain = [
            make_push(days_ago=d, messages=(f"patch {d}",), repo="alice/cache-service")
            for d in range(11)
        ]
        with_bonus = compute(showcase_account, [showcase_repo], conventional, now)
        without_bonus = compute(showcase_account, [showcase_repo], plain, now)
        assert with_bonus.score - without_bonus.score == 10

    def test_reliability_bonus_needs_more_than_ten_days(
        self, showcase_account, showcase_repo, conventional_pushes, now
    ):
        eleven_days = compute(showcase_account, [showcase_repo], conventional_pushes, now)
        ten_days = compute(showcase_account, [showcase_repo], conventional_pushes[:10], now)
        assert eleven_days.score - ten_days.score == 5

    def test_only_first_commit_of_push_counts(self, showcase_account, showcase_repo, make_push, now):
        pushes = [
            make_push(days_ago=d, messages=("wip", "feat: real work"), repo="alice/cache-service")
            for d in range(5)
        ]
        report = compute(showcase_account, [showcase_repo], pushes, now)
        assert report.score == 65
        assert COMMIT_DISCIPLINE_STRENGTH not in report.strengths


class TestStructuralPenalties:
    def test_fork_only_profile(self, make_repo, now):
        account = Account(
            login="forker",
            bio="I fork things",
            location="Berlin",
            email="f@example.com",
            blog="https://forker.dev",
            followers=10,
            public_repos=5,
        )
        forks = [make_repo(f"fork-{i}", is_fork=True, description="upstream copy") for i in range(10)]
        report = compute(account, forks, [], now)
        assert report.score == 61
        assert "Lack of original work (Fork-only profile)" in report.red_flags
        assert DORMANCY_FLAG not in report.red_flags

    def test_fork_only_penalty_is_the_only_difference(self, make_repo, now):
        account = Account(
            login="forker",
            bio="I fork things",
            location="Berlin",
            email="f@example.com",
            blog="https://forker.dev",
            followers=10,
            public_repos=5,
        )
        forked = compute(account, [make_repo(f"fork-{i}", is_fork=True) for i in range(10)], [], now)
        original = compute(account, [make_repo(f"repo-{i}") for i in range(10)], [], now)

        assert original.score == 56
        assert forked.score == 31
        assert original.score - forked.score == Scorer.FORK_ONLY_PENALTY == 25
        assert "Lack of original work (Fork-only profile)" not in original.red_flags

    def test_dormant_profile(self, make_repo, now):
        stale = make_repo("old", description="ancient", updated_at=now - timedelta(days=400))
        report = compute(Account(login="alice", bio="hi"), [stale], [], now)
        assert DORMANCY_FLAG in report.red_flags

    def test_security_keywords_flagged(self, make_repo, now):
        repo = make_repo("my-secret-keys", description="dump")
        report = compute(Account(login="alice"), [repo], [], now)
        assert "Security Hygiene: Detected possible secrets in public repos" in report.red_flags


class TestProfileHygiene:
    def test_follower_tier_never_reaches_strong_influence(self, now):
        few = compute(Account(login="a", followers=10), [], [], now)
        many = compute(Account(login="a", followers=5000), [], [], now)
        assert many.score == few.score
        assert "Strong community influence" not in many.strengths
        assert "Decent follower count (Social Proof)" in many.strengths

    def test_external_pull_requests(self, make_pr, now):
        prs = [make_pr(repo="bigcorp/tool"), make_pr(repo="Alice/cache-service")]
        report = compute(Account(login="alice"), [], prs, now)
        assert "Open Source Contributor (1 external PRs)" in report.strengths


class TestReportShape:
    def test_findings_are_truncated(self, make_repo, make_pr, now):
        account = Account(
            login="alice",
            bio="bio",
            email="a@example.com",
            blog="https://a.dev",
            followers=20,
            public_repos=10,
        )
        repos = [
            make_repo(f"repo-{i}", description="x" * 90, homepage="https://a.dev", stars=3, language=lang)
            for i, lang in enumerate(["Rust", "Go", "Python", "C"])
        ]
        report = compute(account, repos, [make_pr()], now)
        assert len(report.strengths) == 5
        assert report.strengths[0] == "Bio is present"

    def test_score_is_bounded(self, make_repo, make_pr, make_push, now):
        account = Account(
            login="alice", bio="b", location="l", email="e", blog="x", followers=99, public_repos=50
        )
        repos = [
            make_repo(
                f"repo-{i}",
                description="d" * 100,
                homepage="https://x.dev",
                stars=100,
                forks=20,
                topics=["react"],
                language="Rust",
                has_wiki=True,
                has_pages=True,
                created_at=now - timedelta(days=800),
            )
            for i in range(30)
        ]
        events = [make_pr(repo=f"org/tool{i}") for i in range(5)]
        events += [make_push(days_ago=d, messages=("feat: x",)) for d in range(30)]
        events += [
            Event(type="IssueCommentEvent", created_at=now, payload=EventPayload()) for _ in range(6)
        ]
        report = compute(account, repos, events, now)
        assert 0 <= report.score <= 100
        assert report.score == 100
        assert report.verdict == Verdict.WORLD_CLASS

    def test_deterministic(self, showcase_account, showcase_repo, conventional_pushes, now):
        first = Scorer().compute(showcase_account, [showcase_repo], conventional_pushes, now)
        second = Scorer().compute(showcase_account, [showcase_repo], conventional_pushes, now)
        assert first == second

    def test_priority_fixes_skip_showcased_repos(self, make_repo, now):
        repos = [make_repo(f"r{i}", updated_at=now - timedelta(days=i)) for i in range(7)]
        report = compute(Account(login="alice"), repos, [], now)
        showcased = {f.name for f in report.repo_feedback}
        assert len(showcased) == 5
        assert {f.name for f in report.priority_fixes} == {"r5", "r6"}
        assert report.potential_score == min(report.score + 16, 100)
