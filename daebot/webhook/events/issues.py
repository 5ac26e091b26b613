"""Payloads of the 'issues' and 'issue_comment' webhooks."""

from daebot.webhook.events.base import User, WebhookModel, WebhookPayload


class Issue(WebhookModel):
    number: int
    title: str = ""
    body: str | None = None
    state: str = "open"
    html_url: str | None = None
    user: User


class IssueComment(WebhookModel):
    id: int | None = None
    body: str = ""
    html_url: str | None = None
    created_at: str = ""
    user: User


class IssuesPayload(WebhookPayload):
    """issues (opened, closed, ...)."""

    issue: Issue


class IssueCommentPayload(WebhookPayload):
    """issue_comment (created, ...)."""

    issue: Issue
    comment: IssueComment
