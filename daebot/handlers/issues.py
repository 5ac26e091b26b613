"""issues.opened / issues.closed."""

import logging

from daebot.config import AppConfig
from daebot.handlers.common import HANDLER_ERRORS, Extension, HandlerModule
from daebot.models import HandlerOutcome, RepositoryRef
from daebot.services.tracing import add_event
from daebot.webhook.events import IssuesPayload

LOG = logging.getLogger("daebot.handlers.issues")

WELCOME_COMMENT = "Thanks for opening this issue!"


def _describe(payload: IssuesPayload, repo: RepositoryRef) -> str:
    issue = payload.issue
    return f"{repo.full_name}#{issue.number} ({issue.title!r} by @{issue.user.login})"


def handle_issue_opened(
    config: AppConfig,
    payload: IssuesPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    """Greet the author of a new issue."""
    LOG.info("received an issues.opened event: %s", _describe(payload, repo))
    try:
        ext.github.create_comment(repo.full_name, payload.issue.number, WELCOME_COMMENT)
    except HANDLER_ERRORS as e:
        LOG.warning("issues.opened on %s failed: %s", repo.full_name, e)
        return HandlerOutcome.failed(e)
    return HandlerOutcome.ok()


def handle_issue_closed(
    config: AppConfig,
    payload: IssuesPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    """Record the closed issue on the delivery span."""
    logs = f"received an issues.closed event: {_describe(payload, repo)}"
    LOG.info(logs)
    add_event(logs, {"issue.number": str(payload.issue.number)})
    return HandlerOutcome.ok()


OPENED = HandlerModule("issues.opened", "issues.opened", IssuesPayload, handle_issue_opened)
CLOSED = HandlerModule("issues.closed", "issues.closed", IssuesPayload, handle_issue_closed)
