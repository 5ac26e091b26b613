"""Wire config, collaborators and the handler registry together."""

import logging

from daebot.adapters.github import GitHubAdapter
from daebot.config import AppConfig
from daebot.handlers import HANDLER_MODULES, Extension
from daebot.services.kv_store import make_kv_store
from daebot.services.telegram import TelegramClient
from daebot.services.tracing import configure_tracing
from daebot.webhook.dispatcher import Dispatcher, HandlerRegistry

LOG = logging.getLogger("daebot.app")


def build_registry() -> HandlerRegistry:
    return HandlerRegistry(HANDLER_MODULES)


def build_extension(config: AppConfig) -> Extension:
    """GitHub adapter, KV store and Telegram client from config."""
    token = config.github_token_resolved
    if not token:
        LOG.warning("No GitHub token; API calls will be unauthenticated")
    return Extension(
        github=GitHubAdapter(token=token or "", api_url=config.github.api_url),
        kv=make_kv_store(config),
        tg=TelegramClient(config.telegram_token_resolved, api_url=config.telegram.api_url),
    )


def build_dispatcher(config: AppConfig) -> Dispatcher:
    configure_tracing(
        config.tracing.service_name,
        endpoint=config.tracing_endpoint_resolved,
        resource_attributes=config.tracing.resource_attributes,
    )
    registry = build_registry()
    LOG.info("Registered handlers: %s", ", ".join(registry.keys))
    return Dispatcher(config, registry, build_extension(config))
