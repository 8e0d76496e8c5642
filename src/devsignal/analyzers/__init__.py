"""Analyzers for fetching, scoring and narrating developer profiles."""

from devsignal.analyzers.github import GitHubFetcher, ProfileNotFoundError
from devsignal.analyzers.llm import ReviewWriter
from devsignal.analyzers.pipeline import ProfilePipeline
from devsignal.analyzers.revival import plan_revivals
from devsignal.analyzers.scorer import Scorer, compute
from devsignal.analyzers.shadow import analyze
from devsignal.analyzers.timeline import classify

__all__ = [
    "GitHubFetcher",
    "ProfileNotFoundError",
    "ReviewWriter",
    "ProfilePipeline",
    "Scorer",
    "compute",
    "analyze",
    "classify",
    "plan_revivals",
]
