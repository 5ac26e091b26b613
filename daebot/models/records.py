"""Write-once audit records kept in the key-value store."""

from pydantic import BaseModel


class MergedPullRequest(BaseModel):
    ref: str
    sha: str
    title: str
    author: str
    number: int
    updated_at: str | None = None
    html_url: str | None = None
    merged: bool


class MergedPRRecord(BaseModel):
    """Stored under pr.merged.<repo>.<rand>.<number>."""

    repo: str
    owner: str
    default_branch: str
    html_url: str | None = None
    pull_request: MergedPullRequest


class PublishedRelease(BaseModel):
    html_url: str | None = None
    author: str | None = None
    tag: str
    prerelease: bool
    published_at: str | None = None


class ReleaseRecord(BaseModel):
    """Stored under released.<repo>.<rand>.<tag>."""

    repo: str
    owner: str
    default_branch: str
    release: PublishedRelease
