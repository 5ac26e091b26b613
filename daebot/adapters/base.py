"""Abstract base for Git platform adapters."""

from abc import ABC, abstractmethod
from typing import Dict, List

from daebot.models import PR, Comment, Commit, Comparison, FileContent, WorkflowRun


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class GitPlatformAdapter(ABC):
    """Interface of the source-control operations the handlers consume.

    ``repo`` is always the full name (owner/name).
    """

    @abstractmethod
    def get_commit(self, repo: str, ref: str) -> Commit:
        """Fetch the commit a ref (branch, tag or sha) points to."""
        ...

    @abstractmethod
    def compare_commits(self, repo: str, base: str, head: str) -> Comparison:
        """Compare head against base (status ahead/behind/diverged/identical)."""
        ...

    @abstractmethod
    def create_ref(self, repo: str, ref: str, sha: str) -> None:
        """Create a fully qualified ref (refs/heads/... or refs/tags/...)."""
        ...

    @abstractmethod
    def delete_ref(self, repo: str, ref: str) -> None:
        """Delete a ref given without the refs/ prefix (e.g. heads/feature)."""
        ...

    @abstractmethod
    def get_file(self, repo: str, path: str, ref: str | None = None) -> FileContent:
        """Fetch and decode a file from the contents API."""
        ...

    @abstractmethod
    def update_file(
        self,
        repo: str,
        path: str,
        content: str,
        sha: str,
        branch: str,
        message: str,
        committer: Dict[str, str] | None = None,
    ) -> None:
        """Replace a file's content with a new commit on branch."""
        ...

    @abstractmethod
    def create_pr(self, repo: str, title: str, body: str, head: str, base: str) -> PR:
        """Create a pull request."""
        ...

    @abstractmethod
    def merge_branches(self, repo: str, base: str, head: str) -> str | None:
        """Merge head into base; returns the merge sha (None if nothing to merge)."""
        ...

    @abstractmethod
    def add_labels(self, repo: str, issue_number: int, labels: List[str]) -> None:
        """Add labels to an issue or PR."""
        ...

    @abstractmethod
    def add_assignees(self, repo: str, issue_number: int, assignees: List[str]) -> None:
        """Add assignees to an issue or PR."""
        ...

    @abstractmethod
    def request_reviewers(
        self,
        repo: str,
        pr_number: int,
        reviewers: List[str] | None = None,
        team_reviewers: List[str] | None = None,
    ) -> None:
        """Request review from users and/or teams."""
        ...

    @abstractmethod
    def create_review(self, repo: str, pr_number: int, body: str, commit_id: str, event: str) -> None:
        """Submit a review (APPROVE, REQUEST_CHANGES, COMMENT)."""
        ...

    @abstractmethod
    def create_workflow_dispatch(
        self,
        repo: str,
        workflow_id: str,
        ref: str,
        inputs: Dict[str, str] | None = None,
    ) -> None:
        """Trigger a workflow_dispatch event."""
        ...

    @abstractmethod
    def list_workflow_runs(self, repo: str, workflow_id: str, per_page: int = 1) -> List[WorkflowRun]:
        """List runs of a workflow, newest first."""
        ...

    @abstractmethod
    def list_issue_labels(self, repo: str, issue_number: int) -> List[str]:
        """Names of the labels currently on an issue or PR."""
        ...

    @abstractmethod
    def create_comment(self, repo: str, issue_number: int, body: str) -> Comment:
        """Post a comment on an issue or PR."""
        ...

    def latest_workflow_run(self, repo: str, workflow_id: str) -> WorkflowRun | None:
        """Most recent run of a workflow, or None if it never ran."""
        runs = self.list_workflow_runs(repo, workflow_id, per_page=1)
        return runs[0] if runs else None
