"""GitHub REST API objects used by the handlers."""

from datetime import datetime

from pydantic import BaseModel


class Commit(BaseModel):
    """Commit with committer identity and date."""

    sha: str
    committer_name: str = ""
    committer_date: datetime | None = None


class Comparison(BaseModel):
    """Result of comparing two refs (GET /compare/base...head)."""

    status: str
    merge_base_commit: Commit
    ahead_by: int = 0
    behind_by: int = 0


class PR(BaseModel):
    """Pull request."""

    number: int
    title: str
    html_url: str | None = None
    head_branch: str = ""
    base_branch: str = ""


class Comment(BaseModel):
    """Comment on an issue or PR."""

    id: int
    body: str
    html_url: str | None = None


class FileContent(BaseModel):
    """Decoded file from the contents API; sha is needed to update it."""

    path: str
    sha: str
    content: str


class WorkflowRun(BaseModel):
    """GitHub Actions workflow run."""

    id: int
    html_url: str
    status: str | None = None
