"""Webhook payload schemas, one per event family.

Each registered handler names the schema its payload is validated against
before the handler runs.
"""

from daebot.webhook.events.base import Organization, Repository, User, WebhookEvent, WebhookPayload
from daebot.webhook.events.issues import Issue, IssueComment, IssueCommentPayload, IssuesPayload
from daebot.webhook.events.pull_request import (
    Label,
    PullRequest,
    PullRequestHead,
    PullRequestLabeledPayload,
    PullRequestPayload,
)
from daebot.webhook.events.repository import NULL_SHA, PushPayload, Release, ReleasePayload, StarPayload

__all__ = [
    "NULL_SHA",
    "Issue",
    "IssueComment",
    "IssueCommentPayload",
    "IssuesPayload",
    "Label",
    "Organization",
    "PullRequest",
    "PullRequestHead",
    "PullRequestLabeledPayload",
    "PullRequestPayload",
    "PushPayload",
    "Release",
    "ReleasePayload",
    "Repository",
    "StarPayload",
    "User",
    "WebhookEvent",
    "WebhookPayload",
]
