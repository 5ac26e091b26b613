"""Tests for pull_request.opened / synchronize / closed / labeled."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from daebot.adapters.base import GitPlatformError
from daebot.config import AppConfig
from daebot.handlers import Extension
from daebot.handlers.pull_request import (
    handle_pr_closed,
    handle_pr_labeled,
    handle_pr_opened,
    handle_pr_synchronize,
)
from daebot.models import Commit, Comparison
from daebot.services.kv_store import MemoryKVStore
from daebot.webhook.events import PullRequestLabeledPayload, PullRequestPayload
from payloads import REPO, base_payload, pull_request


def _payload(action: str, **pr_fields) -> PullRequestPayload:
    return PullRequestPayload.model_validate(base_payload(action=action, pull_request=pull_request(**pr_fields)))


def _labeled(label: str, **pr_fields) -> PullRequestLabeledPayload:
    data = base_payload(action="labeled", pull_request=pull_request(**pr_fields), label={"name": label})
    return PullRequestLabeledPayload.model_validate(data)


class TestOpened:
    def test_feature_pr_on_managed_repo(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        """Typed PR: assignee, labels, QA team review and bot review."""
        outcome = handle_pr_opened(config, _payload("opened", title="feat(dns): add cache"), REPO, ext)

        assert outcome.is_ok
        github.add_assignees.assert_called_once_with("daeuniverse/dae", 12, ["alice"])
        github.add_labels.assert_called_once_with("daeuniverse/dae", 12, ["feature", "not-yet-tested"])
        github.request_reviewers.assert_any_call("daeuniverse/dae", 12, team_reviewers=["qa"])
        github.request_reviewers.assert_any_call("daeuniverse/dae", 12, reviewers=["dae-bot[bot]"])
        assert ext.tg.send_msg.call_count == 2

    def test_bot_author_assigns_bot_login(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        payload = _payload("opened", title="chore(deps): bump x", author="dependabot[bot]")
        handle_pr_opened(config, payload, REPO, ext)
        github.add_assignees.assert_called_once_with("daeuniverse/dae", 12, ["daebot"])

    def test_existing_labels_are_kept(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        github.list_issue_labels.return_value = ["fix"]
        outcome = handle_pr_opened(config, _payload("opened"), REPO, ext)
        assert outcome.is_ok
        github.add_labels.assert_not_called()
        github.request_reviewers.assert_called_once_with("daeuniverse/dae", 12, reviewers=["dae-bot[bot]"])

    def test_docs_pr_gets_label_without_qa(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        handle_pr_opened(config, _payload("opened", title="docs: fix typo"), REPO, ext)
        github.add_labels.assert_called_once_with("daeuniverse/dae", 12, ["documentation"])
        github.request_reviewers.assert_called_once_with("daeuniverse/dae", 12, reviewers=["dae-bot[bot]"])

    def test_untyped_title(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        outcome = handle_pr_opened(config, _payload("opened", title="Update README"), REPO, ext)
        assert outcome.is_ok
        github.add_labels.assert_not_called()
        github.request_reviewers.assert_not_called()

    def test_unmanaged_repo_skips_qa(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        repo = REPO.model_copy(update={"name": "dae-wing"})
        handle_pr_opened(config, _payload("opened"), repo, ext)
        github.add_labels.assert_called_once_with("daeuniverse/dae-wing", 12, ["fix", "not-yet-tested"])
        github.request_reviewers.assert_called_once_with("daeuniverse/dae-wing", 12, reviewers=["dae-bot[bot]"])

    def test_assign_failure_stops(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        github.add_assignees.side_effect = GitPlatformError("422: Validation Failed")
        outcome = handle_pr_opened(config, _payload("opened"), REPO, ext)
        assert outcome.error == "422: Validation Failed"
        github.add_labels.assert_not_called()


def _dt(day: int, hour: int = 0) -> datetime:
    return datetime(2023, 5, day, hour, tzinfo=timezone.utc)


class TestSynchronize:
    @pytest.fixture
    def compare(self, github: MagicMock):
        def set_compare(status: str, base_day: int = 1, pr_day: int = 3, committer: str = "alice") -> None:
            github.compare_commits.return_value = Comparison(
                status=status,
                merge_base_commit=Commit(sha="base", committer_name="bob", committer_date=_dt(base_day)),
            )
            github.get_commit.return_value = Commit(sha="prsha", committer_name=committer, committer_date=_dt(pr_day))

        return set_compare

    def test_diverged_branch_is_merged(self, config: AppConfig, ext: Extension, github: MagicMock, compare) -> None:
        compare("diverged")
        outcome = handle_pr_synchronize(config, _payload("synchronize"), REPO, ext)

        assert outcome.is_ok
        github.compare_commits.assert_called_once_with("daeuniverse/dae", "main", "fix-leak")
        github.get_commit.assert_called_once_with("daeuniverse/dae", "fix-leak")
        github.create_comment.assert_called_once()
        assert "out-of-sync to main" in github.create_comment.call_args[0][2]
        github.merge_branches.assert_called_once_with("daeuniverse/dae", base="fix-leak", head="main")
        ext.tg.send_msg.assert_called_once()

    @pytest.mark.parametrize("status", ["ahead", "behind", "identical"])
    def test_non_diverged_never_synced(
        self, config: AppConfig, ext: Extension, github: MagicMock, compare, status: str
    ) -> None:
        compare(status, base_day=1, pr_day=30)
        outcome = handle_pr_synchronize(config, _payload("synchronize"), REPO, ext)
        assert outcome.is_ok
        github.merge_branches.assert_not_called()
        github.create_comment.assert_not_called()

    def test_last_commit_by_github_not_synced(
        self, config: AppConfig, ext: Extension, github: MagicMock, compare
    ) -> None:
        compare("diverged", committer="GitHub")
        handle_pr_synchronize(config, _payload("synchronize"), REPO, ext)
        github.merge_branches.assert_not_called()

    def test_merge_conflict_is_error(self, config: AppConfig, ext: Extension, github: MagicMock, compare) -> None:
        compare("diverged")
        github.merge_branches.side_effect = GitPlatformError("409: Merge conflict")
        outcome = handle_pr_synchronize(config, _payload("synchronize"), REPO, ext)
        assert outcome.error == "409: Merge conflict"
        ext.tg.send_msg.assert_not_called()

    def test_invalid_max_age_is_error(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        config.bot.pr_max_age = "one day"
        outcome = handle_pr_synchronize(config, _payload("synchronize"), REPO, ext)
        assert not outcome.is_ok
        github.compare_commits.assert_not_called()


class TestClosed:
    def test_not_merged_does_nothing(self, config: AppConfig, ext: Extension, kv: MemoryKVStore) -> None:
        outcome = handle_pr_closed(config, _payload("closed"), REPO, ext)
        assert outcome.is_ok
        assert kv._data == {}
        ext.tg.send_msg.assert_not_called()

    def test_merged_pr_is_recorded(self, config: AppConfig, ext: Extension, kv: MemoryKVStore, github: MagicMock) -> None:
        outcome = handle_pr_closed(config, _payload("closed", merged=True), REPO, ext)

        assert outcome.is_ok
        (key, record), = kv._data.items()
        assert key.startswith("pr.merged.dae.")
        assert key.endswith(".12")
        assert len(key.split(".")[3]) == 7
        assert record["pull_request"]["number"] == 12
        assert record["pull_request"]["merged"] is True
        assert record["default_branch"] == "main"
        github.create_ref.assert_not_called()
        assert "has been merged into main" in ext.tg.send_msg.call_args[0][0]

    def test_merged_release_branch_tags_prerelease(
        self, config: AppConfig, ext: Extension, github: MagicMock
    ) -> None:
        payload = _payload("closed", merged=True, ref="release-v0.2.0rc1", title="ci(release): draft release v0.2.0rc1")
        outcome = handle_pr_closed(config, payload, REPO, ext)

        assert outcome.is_ok
        github.get_commit.assert_called_once_with("daeuniverse/dae", "main")
        github.create_ref.assert_called_once_with("daeuniverse/dae", "refs/tags/v0.2.0rc1", "headsha")
        github.create_workflow_dispatch.assert_called_once_with(
            "daeuniverse/dae", "prerelease.yml", ref="main", inputs={"tag": "v0.2.0rc1"}
        )
        assert ext.tg.send_msg.call_count == 2

    def test_merged_release_branch_tags_release(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        payload = _payload("closed", merged=True, ref="release-v0.2.0")
        handle_pr_closed(config, payload, REPO, ext)
        assert github.create_workflow_dispatch.call_args[0][1] == "release.yml"

    def test_tag_failure_is_error(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        github.create_ref.side_effect = GitPlatformError("422: Reference already exists")
        payload = _payload("closed", merged=True, ref="release-v0.2.0")
        outcome = handle_pr_closed(config, payload, REPO, ext)
        assert outcome.error == "422: Reference already exists"
        github.create_workflow_dispatch.assert_not_called()


class TestLabeled:
    def test_tested_label_approves(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        outcome = handle_pr_labeled(config, _labeled("tested"), REPO, ext)
        assert outcome.is_ok
        github.create_review.assert_called_once()
        kwargs = github.create_review.call_args[1]
        assert kwargs["event"] == "APPROVE"
        assert kwargs["commit_id"] == "prsha"
        ext.tg.send_msg.assert_called_once()

    def test_hotfix_is_testable(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        handle_pr_labeled(config, _labeled("tested", title="hotfix: crash on start"), REPO, ext)
        github.create_review.assert_called_once()

    def test_other_label_ignored(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        handle_pr_labeled(config, _labeled("fix"), REPO, ext)
        github.create_review.assert_not_called()

    def test_untestable_title_ignored(self, config: AppConfig, ext: Extension, github: MagicMock) -> None:
        handle_pr_labeled(config, _labeled("tested", title="docs: typo"), REPO, ext)
        github.create_review.assert_not_called()
