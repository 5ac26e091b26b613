"""push: keep the downstream repo in sync with its upstream source.

1. New commits on the upstream main branch dispatch the sync workflow on
   the downstream repo.
2. When that workflow pushes a fresh sync branch to the downstream repo, a
   pull request is opened for it.
"""

import json
import logging

from daebot.config import AppConfig
from daebot.handlers.common import HANDLER_ERRORS, Extension, HandlerModule, audit
from daebot.models import HandlerOutcome, RepositoryRef
from daebot.webhook.events import PushPayload

LOG = logging.getLogger("daebot.handlers.push")

SYNC_PR_TITLE = "chore(sync): keep upstream source up-to-date"
AUTOMATED_PR_LABEL = "automated-pr"


def _dispatch_upstream_sync(
    config: AppConfig,
    payload: PushPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> None:
    sync = config.sync
    downstream = f"{repo.owner}/{sync.downstream_repo}"
    default_branch = payload.repository.default_branch
    ext.github.create_workflow_dispatch(
        downstream,
        sync.workflow,
        ref=default_branch,
        inputs={
            "wing-head": default_branch,
            "wing-sync-message": sync.message,
            "pr-branch": sync.branch,
        },
    )
    run = ext.github.latest_workflow_run(downstream, sync.workflow)
    run_url = run.html_url if run else "n/a"
    msg = (
        f"🏗️ a new commit was pushed to {repo.name} ({default_branch}); "
        f"dispatched {sync.branch} workflow for {sync.downstream_repo}; url: {run_url}"
    )
    audit(ext, msg, config.audit_channels, LOG)


def _open_sync_pr(
    config: AppConfig,
    payload: PushPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> None:
    default_branch = payload.repository.default_branch
    run = ext.github.latest_workflow_run(repo.full_name, config.sync.workflow)
    run_url = run.html_url if run else "n/a"
    msg = (
        f"⏳ {repo.name} (origin/{default_branch}) is currently out-of-sync to "
        f"{config.sync.upstream_repo} (origin/{default_branch}); changes are proposed by "
        f"@{config.bot.login} in actions - {run_url}"
    )
    pr = ext.github.create_pr(
        repo.full_name,
        title=SYNC_PR_TITLE,
        body=msg,
        head=payload.branch,
        base=default_branch,
    )
    ext.github.add_labels(repo.full_name, pr.number, [AUTOMATED_PR_LABEL])
    ext.github.add_assignees(repo.full_name, pr.number, [config.bot.login])
    audit(ext, msg, config.audit_channels, LOG)


def handle_push(config: AppConfig, payload: PushPayload, repo: RepositoryRef, ext: Extension) -> HandlerOutcome:
    LOG.info(
        "received a push event: %s; ref: %s; repo: %s",
        json.dumps(payload.head_commit),
        payload.ref,
        repo.name,
    )
    try:
        if payload.ref == "refs/heads/main" and repo.name == config.sync.upstream_repo:
            _dispatch_upstream_sync(config, payload, repo, ext)

        if payload.created and repo.name == config.sync.downstream_repo and payload.branch == config.sync.branch:
            _open_sync_pr(config, payload, repo, ext)
    except HANDLER_ERRORS as e:
        LOG.warning("push on %s failed: %s", repo.full_name, e)
        return HandlerOutcome.failed(e)
    return HandlerOutcome.ok()


MODULE = HandlerModule("push", "push", PushPayload, handle_push)
