"""Data models for outcomes, repositories, store records and GitHub objects (Pydantic)."""

from daebot.models.github import PR, Comment, Commit, Comparison, FileContent, WorkflowRun
from daebot.models.outcome import FAILED_RESULT, OK_RESULT, SKIPPED_RESULT, HandlerOutcome
from daebot.models.records import MergedPRRecord, MergedPullRequest, PublishedRelease, ReleaseRecord
from daebot.models.repository import RepositoryRef

__all__ = [
    "FAILED_RESULT",
    "OK_RESULT",
    "PR",
    "SKIPPED_RESULT",
    "Comment",
    "Commit",
    "Comparison",
    "FileContent",
    "HandlerOutcome",
    "MergedPRRecord",
    "MergedPullRequest",
    "PublishedRelease",
    "ReleaseRecord",
    "RepositoryRef",
    "WorkflowRun",
]
