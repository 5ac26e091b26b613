"""Shared fixtures: config and mocked collaborators."""

from unittest.mock import MagicMock

import pytest

from daebot.adapters.base import GitPlatformAdapter
from daebot.config import AppConfig, TelegramConfig
from daebot.handlers import Extension
from daebot.models import PR, Commit, WorkflowRun
from daebot.services.kv_store import MemoryKVStore
from daebot.services.telegram import TelegramClient


@pytest.fixture
def config() -> AppConfig:
    """Defaults plus one audit and one public channel."""
    return AppConfig(telegram=TelegramConfig(audit_channel_id="audit", channel_id="public"))


@pytest.fixture
def github() -> MagicMock:
    gh = MagicMock(spec=GitPlatformAdapter)
    gh.get_commit.return_value = Commit(sha="headsha")
    gh.latest_workflow_run.return_value = WorkflowRun(id=1, html_url="https://github.com/daeuniverse/daed/actions/runs/1")
    gh.create_pr.return_value = PR(number=77, title="draft", html_url="https://github.com/daeuniverse/dae/pull/77")
    gh.list_issue_labels.return_value = []
    return gh


@pytest.fixture
def tg() -> MagicMock:
    return MagicMock(spec=TelegramClient)


@pytest.fixture
def kv() -> MemoryKVStore:
    return MemoryKVStore()


@pytest.fixture
def ext(github: MagicMock, kv: MemoryKVStore, tg: MagicMock) -> Extension:
    return Extension(github=github, kv=kv, tg=tg)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """load_config snapshots os.environ for secret lookup; start every test empty."""
    monkeypatch.setattr("daebot.config._current_env", {})
