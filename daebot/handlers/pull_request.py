"""pull_request.opened / synchronize / closed / labeled."""

import logging
from concurrent.futures import ThreadPoolExecutor

from daebot.config import AppConfig
from daebot.handlers.common import HANDLER_ERRORS, Extension, HandlerModule, audit, record_key
from daebot.models import HandlerOutcome, MergedPRRecord, MergedPullRequest, RepositoryRef
from daebot.utils.branch_sync import decide_branch_sync, parse_max_age
from daebot.utils.pr_labels import classify_pr_title, is_testable, labels_for_pr, requires_testing
from daebot.utils.release_tag import is_prerelease
from daebot.webhook.events import PullRequestLabeledPayload, PullRequestPayload

LOG = logging.getLogger("daebot.handlers.pull_request")

TESTED_LABEL = "tested"
RELEASE_BRANCH_PREFIX = "release-"


def _pr_link(payload: PullRequestPayload, with_title: bool = True) -> str:
    pr = payload.pull_request
    text = f"#{pr.number}: {pr.title}" if with_title else f"#{pr.number}"
    return f"[{text}]({pr.html_url})"


def _log_received(event: str, payload: PullRequestPayload, repo: RepositoryRef) -> None:
    pr = payload.pull_request
    LOG.info(
        "received a %s event: %s#%s %r (head %s, by @%s)",
        event,
        repo.full_name,
        pr.number,
        pr.title,
        pr.head.ref,
        pr.user.login,
    )


# -- opened ------------------------------------------------------------------


def handle_pr_opened(
    config: AppConfig,
    payload: PullRequestPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    """Assign the author, label by title kind, and request reviews."""
    _log_received("pull_request.opened", payload, repo)
    pr = payload.pull_request

    # 1. default assignee
    try:
        author = config.bot.login if "bot" in pr.user.login else pr.user.login
        ext.github.add_assignees(repo.full_name, pr.number, [author])
        msg = f"👷 PR - {_pr_link(payload)} is raised in {repo.name}; assign @{author} as the default assignee."
        audit(ext, msg, config.audit_channels, LOG)
    except HANDLER_ERRORS as e:
        LOG.warning("assigning PR #%s failed: %s", pr.number, e)
        return HandlerOutcome.failed(e)

    # 2. labels, only when none were set by the author
    try:
        existing = ext.github.list_issue_labels(repo.full_name, pr.number)
        labels = labels_for_pr(pr.title)
        if not existing and labels:
            msg = f"🏷 PR - {_pr_link(payload, with_title=False)} in {repo.name} is missing labels; added {labels}."
            if requires_testing(pr.title) and repo.name in config.bot.managed_repos:
                ext.github.request_reviewers(repo.full_name, pr.number, team_reviewers=[config.bot.qa_team])
            ext.github.add_labels(repo.full_name, pr.number, labels)
            audit(ext, msg, config.audit_channels, LOG)
    except HANDLER_ERRORS as e:
        LOG.warning("labeling PR #%s failed: %s", pr.number, e)
        return HandlerOutcome.failed(e)

    # 3. bot review for typed PRs
    try:
        if classify_pr_title(pr.title) is not None:
            ext.github.request_reviewers(repo.full_name, pr.number, reviewers=[config.bot.reviewer])
    except HANDLER_ERRORS as e:
        LOG.warning("requesting review on PR #%s failed: %s", pr.number, e)
        return HandlerOutcome.failed(e)

    return HandlerOutcome.ok()


# -- synchronize -------------------------------------------------------------


def handle_pr_synchronize(
    config: AppConfig,
    payload: PullRequestPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    """Merge the default branch into a diverged PR branch."""
    _log_received("pull_request.synchronize", payload, repo)
    pr = payload.pull_request
    default_branch = payload.repository.default_branch

    try:
        max_age = parse_max_age(config.bot.pr_max_age)
        with ThreadPoolExecutor(max_workers=2) as pool:
            diff_future = pool.submit(ext.github.compare_commits, repo.full_name, default_branch, pr.head.ref)
            commit_future = pool.submit(ext.github.get_commit, repo.full_name, pr.head.ref)
        comparison = diff_future.result()
        pr_commit = commit_future.result()

        merge_base_date = comparison.merge_base_commit.committer_date
        if merge_base_date is None or pr_commit.committer_date is None:
            return HandlerOutcome.failed("commit without committer date")

        decision = decide_branch_sync(
            comparison.status,
            merge_base_date,
            pr_commit.committer_date,
            pr_commit.committer_name,
            max_age,
        )
        LOG.info(
            "sync check PR #%s: status=%s exceed_age_timeout=%s last_committer=%s age_deadline=%s pr_date=%s",
            pr.number,
            comparison.status,
            decision.exceeds_age_timeout,
            pr_commit.committer_name,
            decision.age_deadline.isoformat(),
            pr_commit.committer_date.isoformat(),
        )
        if not decision.should_sync:
            return HandlerOutcome.ok()

        ext.github.create_comment(
            repo.full_name,
            pr.number,
            f"❌ Your branch is currently out-of-sync to {default_branch}. No worry, I will fix it for you.",
        )
        ext.github.merge_branches(repo.full_name, base=pr.head.ref, head=default_branch)
        msg = (
            f"🚗 PR {_pr_link(payload)} is currently out-of-sync in {repo.name}; automatically merge "
            f"origin/{default_branch} to keep it up-to-date; url: {pr.html_url}"
        )
        audit(ext, msg, config.audit_channels, LOG)
    except HANDLER_ERRORS as e:
        LOG.warning("syncing PR #%s failed: %s", pr.number, e)
        return HandlerOutcome.failed(e)
    return HandlerOutcome.ok()


# -- closed ------------------------------------------------------------------


def _record_merged(config: AppConfig, payload: PullRequestPayload, repo: RepositoryRef, ext: Extension) -> None:
    pr = payload.pull_request
    record = MergedPRRecord(
        repo=repo.name,
        owner=repo.owner,
        default_branch=payload.repository.default_branch,
        html_url=payload.repository.html_url,
        pull_request=MergedPullRequest(
            ref=pr.head.ref,
            sha=pr.head.sha,
            title=pr.title,
            author=pr.user.login,
            number=pr.number,
            updated_at=pr.updated_at,
            html_url=pr.html_url,
            merged=pr.merged,
        ),
    )
    ext.kv.set(record_key("pr.merged", repo.name, pr.number), record.model_dump())
    msg = (
        f"🚀 PR - {_pr_link(payload, with_title=False)} in {repo.name} has been merged into "
        f"{payload.repository.default_branch}; good job guys, let's keep it up"
    )
    audit(ext, msg, config.audit_channels, LOG)


def _tag_release(config: AppConfig, payload: PullRequestPayload, repo: RepositoryRef, ext: Extension) -> None:
    pr = payload.pull_request
    default_branch = payload.repository.default_branch
    tag = pr.head.ref.split("-", 1)[1]
    workflow = "prerelease.yml" if is_prerelease(tag) else "release.yml"

    head = ext.github.get_commit(repo.full_name, default_branch)
    ext.github.create_ref(repo.full_name, f"refs/tags/{tag}", head.sha)
    ext.github.create_workflow_dispatch(repo.full_name, workflow, ref=default_branch, inputs={"tag": tag})
    run = ext.github.latest_workflow_run(repo.full_name, workflow)
    run_url = run.html_url if run else "n/a"

    msg = (
        f"🌌 PR - {_pr_link(payload, with_title=False)} associated with {pr.head.ref} has been merged; "
        f"created and pushed a new release tag {tag}; release build is now kicked off! "
        f"just chill, we are getting there 💪; workflow run: {run_url}"
    )
    audit(ext, msg, config.audit_channels, LOG)


def handle_pr_closed(
    config: AppConfig,
    payload: PullRequestPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    """Record merged PRs; tag and build releases when a release branch is merged."""
    _log_received("pull_request.closed", payload, repo)
    pr = payload.pull_request
    if not pr.merged:
        return HandlerOutcome.ok()
    try:
        _record_merged(config, payload, repo, ext)
        if pr.head.ref.startswith(RELEASE_BRANCH_PREFIX):
            _tag_release(config, payload, repo, ext)
    except HANDLER_ERRORS as e:
        LOG.warning("post-merge of PR #%s failed: %s", pr.number, e)
        return HandlerOutcome.failed(e)
    return HandlerOutcome.ok()


# -- labeled -----------------------------------------------------------------


def handle_pr_labeled(
    config: AppConfig,
    payload: PullRequestLabeledPayload,
    repo: RepositoryRef,
    ext: Extension,
) -> HandlerOutcome:
    """Approve a PR once it is labeled as tested."""
    _log_received("pull_request.labeled", payload, repo)
    pr = payload.pull_request
    if payload.label.name != TESTED_LABEL or not is_testable(pr.title):
        return HandlerOutcome.ok()
    try:
        ext.github.create_review(
            repo.full_name,
            pr.number,
            body="🧪 Since the PR has been fully tested, please consider merging it.",
            commit_id=pr.head.sha,
            event="APPROVE",
        )
        msg = (
            f"🧪 PR - {_pr_link(payload)} in {repo.name} has been fully tested; "
            "please consider merging it as soon as possible."
        )
        audit(ext, msg, config.audit_channels, LOG)
    except HANDLER_ERRORS as e:
        LOG.warning("approving PR #%s failed: %s", pr.number, e)
        return HandlerOutcome.failed(e)
    return HandlerOutcome.ok()


OPENED = HandlerModule("pull_request.opened", "pull_request.opened", PullRequestPayload, handle_pr_opened)
SYNCHRONIZE = HandlerModule(
    "pull_request.synchronize",
    "pull_request.synchronize",
    PullRequestPayload,
    handle_pr_synchronize,
)
CLOSED = HandlerModule("pull_request.closed", "pull_request.closed", PullRequestPayload, handle_pr_closed)
LABELED = HandlerModule("pull_request.labeled", "pull_request.labeled", PullRequestLabeledPayload, handle_pr_labeled)
