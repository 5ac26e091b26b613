"""Tracing via OpenTelemetry.

With an OTLP endpoint configured, spans are batched and exported over
OTLP/HTTP to ``<endpoint>/v1/traces`` with the configured resource
attributes. Without one, the API's no-op tracer is used and spans cost
nothing.
"""

import logging
from typing import Mapping

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor, SpanExporter

from daebot import __version__

LOG = logging.getLogger("daebot.services.tracing")

_service_name = "daebot"
_provider: TracerProvider | None = None


def configure_tracing(
    service_name: str,
    endpoint: str | None = None,
    resource_attributes: Mapping[str, str] | None = None,
    exporter: SpanExporter | None = None,
) -> TracerProvider | None:
    """Set up the tracer used by get_tracer().

    endpoint installs a global provider exporting over OTLP/HTTP. exporter
    (tests, local debugging) is attached synchronously to a private
    provider instead. Returns the provider, or None when spans are no-ops.
    """
    global _service_name, _provider
    _service_name = service_name or "daebot"
    if exporter is None and not endpoint:
        LOG.info("No OTLP endpoint configured; spans are not exported")
        _provider = None
        return None

    resource = Resource.create(
        {
            **dict(resource_attributes or {}),
            SERVICE_NAME: _service_name,
            SERVICE_VERSION: __version__,
        }
    )
    provider = TracerProvider(resource=resource)
    if exporter is not None:
        provider.add_span_processor(SimpleSpanProcessor(exporter))
    else:
        url = f"{endpoint.rstrip('/')}/v1/traces"
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=url)))
        trace.set_tracer_provider(provider)
        LOG.info("Exporting traces to %s", url)
    _provider = provider
    return provider


def shutdown_tracing() -> None:
    """Flush pending spans and stop exporting."""
    global _provider
    if _provider is not None:
        _provider.shutdown()
        _provider = None


def get_tracer() -> trace.Tracer:
    if _provider is not None:
        return _provider.get_tracer(_service_name)
    return trace.get_tracer(_service_name)


def add_event(name: str, attributes: Mapping[str, str] | None = None) -> None:
    """Attach an event to the current span (if any)."""
    trace.get_current_span().add_event(name, attributes=dict(attributes or {}))
