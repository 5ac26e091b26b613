"""Tests for tracing: exported dispatcher spans and OTLP wiring."""

from unittest.mock import MagicMock, patch

import pytest
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from daebot.adapters.base import GitPlatformError
from daebot.app import build_registry
from daebot.config import AppConfig, TracingConfig
from daebot.handlers import Extension
from daebot.models import HandlerOutcome
from daebot.services import tracing
from daebot.webhook.dispatcher import Dispatcher
from daebot.webhook.events import WebhookEvent
from payloads import base_payload


@pytest.fixture
def spans():
    exporter = InMemorySpanExporter()
    tracing.configure_tracing("daebot-test", resource_attributes={"metadata.repo": "dae-bot"}, exporter=exporter)
    yield exporter
    tracing.shutdown_tracing()


def _issue(state: str) -> dict:
    return {"number": 5, "title": "crash", "state": state, "user": {"login": "alice"}}


def test_dispatch_records_handler_span(spans: InMemorySpanExporter, config: AppConfig, ext: Extension) -> None:
    dispatcher = Dispatcher(config, build_registry(), ext)
    event = WebhookEvent(
        name="issues",
        action="opened",
        delivery_id="72d3162e",
        payload=base_payload(action="opened", issue=_issue("open")),
    )
    outcome = dispatcher.dispatch(event)

    assert outcome == HandlerOutcome.ok()
    (span,) = spans.get_finished_spans()
    assert span.name == "app.handler.issues.opened"
    assert span.attributes["event.key"] == "issues.opened"
    assert span.attributes["event.delivery_id"] == "72d3162e"
    assert span.attributes["repo.owner"] == "daeuniverse"
    assert span.attributes["repo.name"] == "dae"
    assert span.attributes["handler.result"] == "ok!"
    assert "handler.error" not in span.attributes
    assert span.resource.attributes["service.name"] == "daebot-test"
    assert span.resource.attributes["metadata.repo"] == "dae-bot"


def test_failed_handler_error_on_span(
    spans: InMemorySpanExporter, config: AppConfig, ext: Extension, github: MagicMock
) -> None:
    github.create_comment.side_effect = GitPlatformError("403: Forbidden")
    dispatcher = Dispatcher(config, build_registry(), ext)
    dispatcher.dispatch(WebhookEvent(name="issues", action="opened", payload=base_payload(issue=_issue("open"))))

    (span,) = spans.get_finished_spans()
    assert span.attributes["handler.error"] == "403: Forbidden"


def test_closed_issue_adds_span_event(spans: InMemorySpanExporter, config: AppConfig, ext: Extension) -> None:
    dispatcher = Dispatcher(config, build_registry(), ext)
    dispatcher.dispatch(WebhookEvent(name="issues", action="closed", payload=base_payload(issue=_issue("closed"))))

    (span,) = spans.get_finished_spans()
    (span_event,) = span.events
    assert "daeuniverse/dae#5" in span_event.name
    assert span_event.attributes["issue.number"] == "5"


def test_no_endpoint_means_no_provider() -> None:
    assert tracing.configure_tracing("daebot") is None
    assert not tracing.get_tracer().start_span("x").is_recording()


def test_endpoint_installs_otlp_exporter() -> None:
    with patch.object(tracing, "OTLPSpanExporter") as exporter_cls, patch.object(
        tracing.trace, "set_tracer_provider"
    ) as set_provider:
        provider = tracing.configure_tracing(
            "daebot", endpoint="http://collector:4318/", resource_attributes={"service.namespace": "daeuniverse"}
        )
    try:
        exporter_cls.assert_called_once_with(endpoint="http://collector:4318/v1/traces")
        set_provider.assert_called_once_with(provider)
        processors = provider._active_span_processor._span_processors
        assert any(isinstance(p, BatchSpanProcessor) for p in processors)
        assert provider.resource.attributes["service.namespace"] == "daeuniverse"
        assert provider.resource.attributes["service.version"] == "0.1.0"
    finally:
        tracing.shutdown_tracing()


def test_endpoint_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("daebot.config._current_env", {"OTEL_EXPORTER_OTLP_ENDPOINT": "http://otel:4318"})
    config = AppConfig(tracing=TracingConfig(endpoint="${OTEL_EXPORTER_OTLP_ENDPOINT}"))
    assert config.tracing_endpoint_resolved == "http://otel:4318"
    assert AppConfig().tracing_endpoint_resolved is None
