"""Logging setup with per-delivery context.

Every record carries ``delivery_id`` and ``event_key`` so the lines of one
webhook delivery can be grepped out of the shared log:

    2023-05-01 10:00:00,000 - daebot.handlers.star - INFO - [72d3162e star.created] ⭐ Repo: ...

The server binds both values with ``delivery_context`` for the duration of a
request; outside a delivery they are "-". Configure via config.yaml
(logging.level, logging.format) or env (LOGGING_LEVEL, LOGGING_FORMAT).
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

from daebot.config import LoggingConfig

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(delivery_id)s %(event_key)s] %(message)s"
NO_CONTEXT = "-"

# Chatty HTTP client loggers, never shown below INFO
QUIET_LOGGERS = ("urllib3", "requests")

_delivery_id: ContextVar[str] = ContextVar("daebot_delivery_id", default=NO_CONTEXT)
_event_key: ContextVar[str] = ContextVar("daebot_event_key", default=NO_CONTEXT)


@contextmanager
def delivery_context(delivery_id: str | None, event_key: str | None) -> Iterator[None]:
    """Tag log records emitted in this block with the delivery id and event key."""
    id_token = _delivery_id.set(delivery_id or NO_CONTEXT)
    key_token = _event_key.set(event_key or NO_CONTEXT)
    try:
        yield
    finally:
        _event_key.reset(key_token)
        _delivery_id.reset(id_token)


class DeliveryContextFilter(logging.Filter):
    """Copies the bound delivery context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.delivery_id = _delivery_id.get()
        record.event_key = _event_key.get()
        return True


def _resolve_level(level: str) -> int:
    """Level name (any case) to its number; unknown names mean INFO."""
    value = logging.getLevelName((level or "").strip().upper())
    return value if isinstance(value, int) else logging.INFO


class DaebotLogging:
    """Configures the root logger from LoggingConfig."""

    def __init__(self, config: LoggingConfig) -> None:
        self.level = _resolve_level(config.level)
        self.format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        logging.basicConfig(level=self.level, format=self.format, force=True)
        # Handler filters also see records propagated from child loggers
        for handler in logging.root.handlers:
            handler.addFilter(DeliveryContextFilter())
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(self.level, logging.INFO))
