"""issue_comment.created: draft a release from a closed release issue.

A maintainer comments "@daebot proceed to release-v0.1.0rc2" on the closed
release issue. The bot then:

1. splices the release notes (issue body after the changelog placeholder)
   into CHANGELOGS.md as of the default branch head,
2. creates release-<tag> from that head and commits the new changelog there,
3. opens a PR release-<tag> -> default branch labeled for auto release.

Merging that PR tags the release (see pull_request.closed).
"""

import logging

from daebot.adapters.base import GitPlatformError
from daebot.config import AppConfig
from daebot.handlers.common import HANDLER_ERRORS, Extension, HandlerModule, audit
from daebot.models import HandlerOutcome, RepositoryRef
from daebot.utils.changelog import ReleaseMetadata, release_date, release_notes_from_issue, splice_changelog
from daebot.utils.release_tag import extract_release_tag
from daebot.webhook.events import IssueCommentPayload

LOG = logging.getLogger("daebot.handlers.issue_comment")

CHANGELOG_PATH = "CHANGELOGS.md"
RELEASE_LABELS = ["automated-pr", "release:auto"]


def is_release_command(config: AppConfig, payload: IssueCommentPayload, repo: RepositoryRef) -> bool:
    """Comment by a maintainer on a closed issue of a managed repo, addressed to the bot."""
    body = payload.comment.body
    return (
        repo.name in config.bot.managed_repos
        and body.startswith(f"@{config.bot.login}")
        and "release-" in body
        and payload.issue.state == "closed"
        and payload.comment.user.login in config.bot.release_maintainers
    )


def draft_release(
    config: AppConfig,
    payload: IssueCommentPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    tag = extract_release_tag(payload.comment.body)
    if not tag:
        LOG.warning("No release tag in comment: %r", payload.comment.body)
        return HandlerOutcome.failed("no release tag found in comment")
    release = ReleaseMetadata.from_tag(tag, release_date(payload.comment.created_at))
    LOG.info("drafting release %s", release.model_dump_json())

    default_branch = payload.repository.default_branch
    notes = release_notes_from_issue(payload.issue.body or "")

    # release branch is only created once the changelog splices cleanly
    head = ext.github.get_commit(repo.full_name, default_branch)
    original = ext.github.get_file(repo.full_name, CHANGELOG_PATH, ref=head.sha)
    changelogs = splice_changelog(original.content, release, notes)

    ext.github.create_ref(repo.full_name, f"refs/heads/{release.branch}", head.sha)
    try:
        ext.github.update_file(
            repo.full_name,
            CHANGELOG_PATH,
            content=changelogs,
            sha=original.sha,
            branch=release.branch,
            message=f"ci: generate changelogs for {release.branch}",
            committer={"name": config.bot.name, "email": config.bot.email},
        )
    except GitPlatformError:
        # drop the branch so the release command can be repeated
        LOG.warning("changelog commit failed; deleting %s", release.branch)
        ext.github.delete_ref(repo.full_name, f"heads/{release.branch}")
        raise

    issue = payload.issue
    msg = (
        f"🛸 Auto release process for {repo.name} begins! Changelogs and release notes are "
        f"generated by @{config.bot.login} automatically. "
        f"Ref: issue [#{issue.number}: {issue.title}]({issue.html_url})"
    )
    pr = ext.github.create_pr(
        repo.full_name,
        title=f"ci(release): draft release {release.tag}",
        body=msg,
        head=release.branch,
        base=default_branch,
    )
    ext.github.add_labels(repo.full_name, pr.number, RELEASE_LABELS)

    msg += f"; PR [#{pr.number}: {pr.title}]({pr.html_url})"
    audit(ext, msg, config.audit_channels, LOG)
    return HandlerOutcome.ok()


def handle_issue_comment_created(
    config: AppConfig,
    payload: IssueCommentPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    LOG.info(
        "received an issue_comment.created event: %s#%s by @%s",
        repo.full_name,
        payload.issue.number,
        payload.comment.user.login,
    )
    if not is_release_command(config, payload, repo):
        return HandlerOutcome.ok()
    try:
        return draft_release(config, payload, repo, ext)
    except HANDLER_ERRORS as e:
        LOG.warning("release drafting on %s failed: %s", repo.full_name, e)
        return HandlerOutcome.failed(e)


MODULE = HandlerModule(
    "issue_comment.created",
    "issue_comment.created",
    IssueCommentPayload,
    handle_issue_comment_created,
)
