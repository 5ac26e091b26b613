"""Types shared by the handlers and the dispatcher."""

import logging
import uuid
from typing import Any, Callable, List, Type

from daebot.adapters.base import GitPlatformAdapter, GitPlatformError
from daebot.config import AppConfig
from daebot.models import HandlerOutcome, RepositoryRef
from daebot.services.kv_store import KeyValueStore, StoreError
from daebot.services.telegram import MessengerError, TelegramClient
from daebot.utils.branch_sync import DurationError
from daebot.utils.changelog import ChangelogError
from daebot.webhook.events import WebhookPayload

# Failures a handler turns into an error outcome instead of raising
HANDLER_ERRORS = (GitPlatformError, StoreError, MessengerError, ChangelogError, DurationError)


class Extension:
    """Collaborator clients handed to every handler."""

    def __init__(self, github: GitPlatformAdapter, kv: KeyValueStore, tg: TelegramClient) -> None:
        self.github = github
        self.kv = kv
        self.tg = tg


Handler = Callable[[AppConfig, Any, RepositoryRef, Extension], HandlerOutcome]


class HandlerModule:
    """A handler registered for one event key, with its payload schema."""

    def __init__(self, name: str, event_key: str, payload_model: Type[WebhookPayload], handler: Handler) -> None:
        self.name = name
        self.event_key = event_key
        self.payload_model = payload_model
        self.handler = handler

    def __repr__(self) -> str:
        return f"HandlerModule({self.event_key!r})"


def audit(
    ext: Extension,
    msg: str,
    channels: List[str],
    log: logging.Logger,
) -> None:
    """Log an audit event and send it to the channels (joined)."""
    log.info(msg)
    ext.tg.send_msg(msg, channels)


def record_key(kind: str, repo: str, ident: object) -> str:
    """Write-once store key: <kind>.<repo>.<7-char random>.<id>."""
    return f"{kind}.{repo}.{uuid.uuid4().hex[:7]}.{ident}"
