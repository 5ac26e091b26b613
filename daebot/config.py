"""Configuration loading from YAML and environment.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


def _is_placeholder(value: str | None) -> bool:
    return not value or value.startswith("${")


# Injected by load_config so secret resolution can read env/file
_current_env: dict[str, str] = {}


class BotConfig(BaseSettings):
    """Bot identity and automation policy."""

    model_config = SettingsConfigDict(env_prefix="BOT_", extra="ignore")

    name: str = Field(default="daebot", description="Bot display name (commit author)")
    login: str = Field(default="daebot", description="Bot GitHub login (mention prefix, default assignee)")
    email: str = Field(default="dae@v2raya.org", description="Bot email for commits")
    reviewer: str = Field(default="dae-bot[bot]", description="Account requested as reviewer on typed PRs")
    qa_team: str = Field(default="qa", description="Team slug asked to review untested PRs")
    managed_repos: List[str] = Field(
        default_factory=lambda: ["dae", "daed"],
        description="Repos where QA review and release drafting apply",
    )
    release_maintainers: List[str] = Field(
        default_factory=lambda: ["yqlbu", "kunish", "mzz2017"],
        description="Logins allowed to start a release from an issue comment",
    )
    webhook_secret: str = Field(default="", description="Secret for webhook verification")
    # ISO-8601 duration (env: BOT_PR_MAX_AGE)
    pr_max_age: str = Field(default="P1D", description="Max age of the merge base before a PR is left alone")


class SyncConfig(BaseSettings):
    """Upstream -> downstream source sync between related repos."""

    model_config = SettingsConfigDict(env_prefix="SYNC_", extra="ignore")

    upstream_repo: str = Field(default="dae-wing", description="Repo whose main branch is watched")
    downstream_repo: str = Field(default="daed", description="Repo that embeds the upstream source")
    branch: str = Field(default="sync-upstream", description="Branch the sync workflow pushes")
    workflow: str = Field(default="sync-upstream.yml", description="Workflow file dispatched on downstream")
    message: str = Field(default="chore(sync): upgrade dae-wing", description="Commit message of the sync")


class GitHubConfig(BaseSettings):
    """GitHub API and webhook settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    webhook_path: str = Field(default="/webhook/github", description="Webhook URL path")


class TelegramConfig(BaseSettings):
    """Telegram Bot API settings for notifications."""

    model_config = SettingsConfigDict(env_prefix="TELEGRAM_", extra="ignore")

    token: str | None = Field(default=None, description="Bot token; use env or secret file")
    api_url: str = Field(default="https://api.telegram.org", description="Bot API base URL")
    audit_channel_id: str = Field(default="", description="Channel receiving every audit event")
    channel_id: str = Field(default="", description="Public channel receiving release announcements")


class KVConfig(BaseSettings):
    """Key-value store (Vercel KV / Upstash REST)."""

    model_config = SettingsConfigDict(env_prefix="KV_", extra="ignore")

    rest_api_url: str = Field(default="", description="REST endpoint; empty keeps data in memory")
    rest_api_token: str | None = Field(default=None, description="REST token; use env or secret file")


class WebhookConfig(BaseSettings):
    """Webhook server settings."""

    model_config = SettingsConfigDict(env_prefix="WEBHOOK_", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")
    enabled: bool = Field(default=True, description="Enable webhook server")


class TracingConfig(BaseSettings):
    """Tracing settings (OpenTelemetry, OTLP/HTTP export)."""

    model_config = SettingsConfigDict(env_prefix="TRACING_", extra="ignore")

    service_name: str = Field(default="daebot", description="service.name resource attribute and tracer name")
    # Collector base URL; spans go to <endpoint>/v1/traces (env: OTEL_EXPORTER_OTLP_ENDPOINT)
    endpoint: str = Field(default="", description="OTLP/HTTP collector URL; empty disables export")
    resource_attributes: Dict[str, str] = Field(
        default_factory=lambda: {
            "service.namespace": "daeuniverse",
            "service.framework": "daebot",
            "metadata.organization": "daeuniverse",
            "metadata.owner": "daeuniverse",
            "metadata.repo": "dae-bot",
        },
        description="Extra resource attributes attached to every span",
    )


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="",
        description="Log format; empty uses the default with delivery id and event key",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    bot: BotConfig = Field(default_factory=BotConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)
    kv: KVConfig = Field(default_factory=KVConfig)
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from env or Docker secret file."""
        t = self.github.token
        if not _is_placeholder(t):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")

    @property
    def webhook_secret_resolved(self) -> str:
        """Resolve webhook secret from env or Docker secret file."""
        s = self.bot.webhook_secret
        if not _is_placeholder(s) and s != "your-webhook-secret-here":
            return s
        return _read_secret("WEBHOOK_SECRET", "WEBHOOK_SECRET_FILE") or ""

    @property
    def telegram_token_resolved(self) -> str | None:
        """Resolve Telegram bot token from env or Docker secret file."""
        t = self.telegram.token
        if not _is_placeholder(t):
            return t
        return _read_secret("TELEGRAM_BOT_TOKEN", "TELEGRAM_BOT_TOKEN_FILE")

    @property
    def kv_token_resolved(self) -> str | None:
        """Resolve KV REST token from env or Docker secret file."""
        t = self.kv.rest_api_token
        if not _is_placeholder(t):
            return t
        return _read_secret("KV_REST_API_TOKEN", "KV_REST_API_TOKEN_FILE")

    @property
    def kv_url_resolved(self) -> str | None:
        """Resolve KV REST endpoint from config or env."""
        u = self.kv.rest_api_url
        if not _is_placeholder(u):
            return u
        return _current_env.get("KV_REST_API_URL") or None

    @property
    def tracing_endpoint_resolved(self) -> str | None:
        """OTLP collector URL from config or OTEL_EXPORTER_OTLP_ENDPOINT."""
        e = self.tracing.endpoint
        if not _is_placeholder(e):
            return e
        return _current_env.get("OTEL_EXPORTER_OTLP_ENDPOINT") or None

    @property
    def audit_channels(self) -> List[str]:
        """Channels receiving every audit notification."""
        return [c for c in [self.telegram.audit_channel_id] if not _is_placeholder(c)]

    @property
    def announce_channels(self) -> List[str]:
        """Audit channel plus the public channel (release announcements)."""
        channels = [self.telegram.audit_channel_id, self.telegram.channel_id]
        return [c for c in channels if not _is_placeholder(c)]


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        # Simple $VAR
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file and environment.

    Secrets: GITHUB_TOKEN, WEBHOOK_SECRET, TELEGRAM_BOT_TOKEN,
    KV_REST_API_TOKEN (or the matching *_FILE variables). PR_MAX_AGE
    overrides bot.pr_max_age whether or not the file exists.
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    raw: dict[str, Any] = {}
    if path.is_file():
        raw = _substitute_env(yaml.safe_load(path.read_text()) or {})

    # Flat env name used by existing deployments
    bot_raw = raw.get("bot") or {}
    if _current_env.get("PR_MAX_AGE"):
        bot_raw = {**bot_raw, "pr_max_age": _current_env["PR_MAX_AGE"]}

    return AppConfig(
        bot=BotConfig(**bot_raw),
        sync=SyncConfig(**(raw.get("sync") or {})),
        github=GitHubConfig(**(raw.get("github") or {})),
        telegram=TelegramConfig(**(raw.get("telegram") or {})),
        kv=KVConfig(**(raw.get("kv") or {})),
        webhook=WebhookConfig(**(raw.get("webhook") or {})),
        tracing=TracingConfig(**(raw.get("tracing") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
