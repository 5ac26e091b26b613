"""Payloads of repository-level webhooks: push, star, release."""

from typing import Any, Dict

from pydantic import Field

from daebot.webhook.events.base import User, WebhookModel, WebhookPayload

NULL_SHA = "0" * 40


class PushPayload(WebhookPayload):
    """push: before is the null sha when the ref was just created."""

    ref: str
    before: str = ""
    after: str = ""
    head_commit: Dict[str, Any] | None = None

    @property
    def branch(self) -> str:
        """Branch name of refs/heads/<branch>."""
        parts = self.ref.split("/", 2)
        return parts[2] if len(parts) == 3 else ""

    @property
    def created(self) -> bool:
        return self.before == NULL_SHA


class StarPayload(WebhookPayload):
    """star.created."""

    starred_at: str | None = None


class Release(WebhookModel):
    tag_name: str
    html_url: str | None = None
    prerelease: bool = False
    published_at: str | None = None
    author: User | None = None


class ReleasePayload(WebhookPayload):
    """release (published, released)."""

    release: Release
    changes: Dict[str, Any] = Field(default_factory=dict)
