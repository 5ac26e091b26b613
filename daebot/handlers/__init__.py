"""Webhook event handlers and the registry wiring them to event keys."""

from daebot.handlers import issue_comment, issues, pull_request, push, release, star
from daebot.handlers.common import Extension, HandlerModule

# Dispatch order; keys are unique
HANDLER_MODULES = (
    push.MODULE,
    star.MODULE,
    issues.OPENED,
    issues.CLOSED,
    issue_comment.MODULE,
    pull_request.OPENED,
    pull_request.SYNCHRONIZE,
    pull_request.CLOSED,
    pull_request.LABELED,
    release.MODULE,
)

__all__ = ["HANDLER_MODULES", "Extension", "HandlerModule"]
