"""star.created: track the star count and celebrate new highs."""

import logging

from daebot.config import AppConfig
from daebot.handlers.common import HANDLER_ERRORS, Extension, HandlerModule, audit
from daebot.models import HandlerOutcome, RepositoryRef
from daebot.webhook.events import StarPayload

LOG = logging.getLogger("daebot.handlers.star")


def stars_key(repo_name: str) -> str:
    return f"stars.{repo_name}"


def handle_star_created(
    config: AppConfig,
    payload: StarPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    """Store stargazers_count when it is higher than the stored count.

    The stored count never decreases; redelivered or out-of-order events
    with a lower count are ignored.
    """
    LOG.info("received a star.created event: %s", repo.full_name)
    incoming = payload.repository.stargazers_count
    if incoming is None:
        return HandlerOutcome.failed("payload has no stargazers_count")
    try:
        stored = ext.kv.get(stars_key(repo.name))
        if stored is None:
            LOG.error("key %s does not exist", stars_key(repo.name))
            return HandlerOutcome.failed("key does not exist")
        try:
            stored_count = int(stored)
        except (TypeError, ValueError):
            return HandlerOutcome.failed(f"stored star count is not a number: {stored!r}")
        if incoming <= stored_count:
            return HandlerOutcome.ok()

        ext.kv.set(stars_key(repo.name), incoming)
        sender = payload.sender
        who = f"[@{sender.login}]({sender.html_url})" if sender else "someone"
        msg = f"⭐ Repo: {repo.name} received a new star from {who}! Total stars: {incoming}"
        audit(ext, msg, config.audit_channels, LOG)
    except HANDLER_ERRORS as e:
        LOG.warning("star count of %s not updated: %s", repo.name, e)
        return HandlerOutcome.failed(e)
    return HandlerOutcome.ok()


MODULE = HandlerModule("star.created", "star.created", StarPayload, handle_star_created)
