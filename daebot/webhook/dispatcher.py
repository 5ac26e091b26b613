"""Route webhook deliveries to the handler registered for their event key."""

import logging
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from pydantic import ValidationError

from daebot.config import AppConfig
from daebot.handlers.common import Extension, HandlerModule
from daebot.models import HandlerOutcome
from daebot.services.tracing import get_tracer
from daebot.webhook.errors import PayloadError
from daebot.webhook.events import WebhookEvent

LOG = logging.getLogger("daebot.webhook.dispatcher")


class HandlerRegistry:
    """Immutable, ordered mapping of event key -> HandlerModule."""

    def __init__(self, modules: Iterable[HandlerModule]) -> None:
        ordered: Tuple[HandlerModule, ...] = tuple(modules)
        by_key = {}
        for module in ordered:
            if module.event_key in by_key:
                raise ValueError(f"duplicate handler for {module.event_key}")
            by_key[module.event_key] = module
        self._modules = ordered
        self._by_key: Mapping[str, HandlerModule] = MappingProxyType(by_key)

    def lookup(self, key: str) -> HandlerModule | None:
        """Exact-match lookup; None when no handler is registered."""
        return self._by_key.get(key)

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(m.event_key for m in self._modules)

    def __len__(self) -> int:
        return len(self._modules)


class Dispatcher:
    """Validates a delivery against its handler's schema and runs the handler."""

    def __init__(self, config: AppConfig, registry: HandlerRegistry, extension: Extension) -> None:
        self._config = config
        self._registry = registry
        self._extension = extension

    def dispatch(self, event: WebhookEvent) -> HandlerOutcome:
        """Run the handler for event.key.

        Raises PayloadError when the payload does not match the handler's
        schema. Unregistered keys are skipped.
        """
        module = self._registry.lookup(event.key)
        if module is None:
            LOG.debug("No handler for %s (delivery %s)", event.key, event.delivery_id)
            return HandlerOutcome.skipped()

        try:
            payload = module.payload_model.model_validate(event.payload)
        except ValidationError as e:
            raise PayloadError(f"invalid {event.key} payload: {e.error_count()} error(s)") from e
        repo = payload.repository_ref()

        with get_tracer().start_as_current_span(f"app.handler.{module.name}") as span:
            span.set_attribute("event.key", event.key)
            span.set_attribute("event.delivery_id", event.delivery_id or "")
            span.set_attribute("repo.owner", repo.owner)
            span.set_attribute("repo.name", repo.name)
            outcome = module.handler(self._config, payload, repo, self._extension)
            span.set_attribute("handler.result", outcome.result)
            if outcome.error:
                span.set_attribute("handler.error", outcome.error)

        if outcome.error:
            LOG.warning("%s on %s: %s (%s)", event.key, repo.full_name, outcome.result, outcome.error)
        else:
            LOG.debug("%s on %s: %s", event.key, repo.full_name, outcome.result)
        return outcome
