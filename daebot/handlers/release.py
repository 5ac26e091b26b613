"""release.published: record the release and announce it publicly."""

import logging

from daebot.config import AppConfig
from daebot.handlers.common import HANDLER_ERRORS, Extension, HandlerModule, audit, record_key
from daebot.models import HandlerOutcome, PublishedRelease, ReleaseRecord, RepositoryRef
from daebot.webhook.events import ReleasePayload

LOG = logging.getLogger("daebot.handlers.release")


def handle_release_published(
    config: AppConfig,
    payload: ReleasePayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    release = payload.release
    record = ReleaseRecord(
        repo=repo.name,
        owner=repo.owner,
        default_branch=payload.repository.default_branch,
        release=PublishedRelease(
            html_url=release.html_url,
            author=release.author.login if release.author else None,
            tag=release.tag_name,
            prerelease=release.prerelease,
            published_at=release.published_at,
        ),
    )
    LOG.info("received a release.published event: %s %s", repo.full_name, release.tag_name)
    try:
        ext.kv.set(record_key("released", repo.name, release.tag_name), record.model_dump())
        msg = (
            f"🌠 {repo.name} published a new release [{release.tag_name}]({release.html_url}); "
            "it's been a long journey, thank you all for contributing to and supporting the "
            f"[@{repo.owner}](https://github.com/{repo.owner}) community!"
        )
        audit(ext, msg, config.announce_channels, LOG)
    except HANDLER_ERRORS as e:
        LOG.warning("recording release %s failed: %s", release.tag_name, e)
        return HandlerOutcome.failed(e)
    return HandlerOutcome.ok()


MODULE = HandlerModule("release.published", "release.published", ReleasePayload, handle_release_published)
