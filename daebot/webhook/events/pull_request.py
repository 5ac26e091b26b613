"""Payloads of the 'pull_request' webhook."""

from daebot.webhook.events.base import User, WebhookModel, WebhookPayload


class PullRequestHead(WebhookModel):
    ref: str
    sha: str = ""


class PullRequest(WebhookModel):
    number: int
    title: str = ""
    html_url: str | None = None
    updated_at: str | None = None
    merged: bool = False
    user: User
    head: PullRequestHead


class Label(WebhookModel):
    name: str


class PullRequestPayload(WebhookPayload):
    """pull_request (opened, synchronize, closed)."""

    pull_request: PullRequest


class PullRequestLabeledPayload(PullRequestPayload):
    """pull_request.labeled: carries the label just added."""

    label: Label
