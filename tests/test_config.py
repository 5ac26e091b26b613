"""Tests for config loading (YAML, ${VAR} substitution, secrets)."""

from pathlib import Path

import pytest

from daebot.config import AppConfig, TelegramConfig, load_config


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in (
        "GITHUB_TOKEN",
        "WEBHOOK_SECRET",
        "WEBHOOK_SECRET_FILE",
        "TELEGRAM_BOT_TOKEN",
        "TELEGRAM_AUDIT_CHANNEL_ID",
        "PR_MAX_AGE",
        "KV_REST_API_URL",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_missing_file_gives_defaults(tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
    config = load_config(tmp_path / "nope.yaml")
    assert config.bot.login == "daebot"
    assert config.bot.managed_repos == ["dae", "daed"]
    assert config.bot.pr_max_age == "P1D"
    assert config.sync.upstream_repo == "dae-wing"
    assert config.github.webhook_path == "/webhook/github"


def test_yaml_with_env_substitution(tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("TELEGRAM_AUDIT_CHANNEL_ID", "-1001")
    path = tmp_path / "config.yaml"
    path.write_text(
        "bot:\n"
        "  login: testbot\n"
        "  managed_repos: [dae]\n"
        "telegram:\n"
        "  audit_channel_id: ${TELEGRAM_AUDIT_CHANNEL_ID}\n"
        "  channel_id: ${TELEGRAM_CHANNEL_ID}\n"
        "webhook:\n"
        "  port: 9000\n"
    )
    config = load_config(path)
    assert config.bot.login == "testbot"
    assert config.bot.managed_repos == ["dae"]
    assert config.webhook.port == 9000
    assert config.audit_channels == ["-1001"]
    # unset variable stays a placeholder and is not used as a channel
    assert config.announce_channels == ["-1001"]


def test_pr_max_age_env_override(tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("PR_MAX_AGE", "PT12H")
    path = tmp_path / "config.yaml"
    path.write_text("bot:\n  pr_max_age: P2D\n")
    assert load_config(path).bot.pr_max_age == "PT12H"


def test_pr_max_age_env_override_without_file(tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
    """The CLI falls back to a missing config path; PR_MAX_AGE must still apply."""
    clean_env.setenv("PR_MAX_AGE", "PT1H")
    config = load_config(tmp_path / "missing.yaml")
    assert config.bot.pr_max_age == "PT1H"
    assert config.bot.login == "daebot"


def test_secrets_from_env_and_file(tmp_path: Path, clean_env: pytest.MonkeyPatch) -> None:
    secret_file = tmp_path / "secret"
    secret_file.write_text("s3cret\n")
    clean_env.setenv("GITHUB_TOKEN", "ghp_x")
    clean_env.setenv("WEBHOOK_SECRET_FILE", str(secret_file))
    path = tmp_path / "config.yaml"
    path.write_text("github:\n  token: ${GITHUB_TOKEN}\nbot:\n  webhook_secret: ${WEBHOOK_SECRET}\n")
    config = load_config(path)
    assert config.github_token_resolved == "ghp_x"
    assert config.webhook_secret_resolved == "s3cret"


def test_explicit_secret_wins(clean_env: pytest.MonkeyPatch) -> None:
    config = AppConfig()
    config.bot.webhook_secret = "inline"
    assert config.webhook_secret_resolved == "inline"


def test_announce_channels() -> None:
    config = AppConfig(telegram=TelegramConfig(audit_channel_id="a", channel_id="p"))
    assert config.audit_channels == ["a"]
    assert config.announce_channels == ["a", "p"]


def test_example_config_loads(clean_env: pytest.MonkeyPatch) -> None:
    path = Path(__file__).resolve().parents[1] / "config.example.yaml"
    config = load_config(path)
    assert config.bot.release_maintainers
    assert config.sync.workflow.endswith(".yml")
