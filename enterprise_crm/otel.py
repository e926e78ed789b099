from __future__ import annotations

from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor, SpanExporter
from opentelemetry.trace import Span

from enterprise_crm.core.config import Settings


_provider: TracerProvider | None = None


def setup_otel(settings: Settings, exporter: SpanExporter | None = None) -> TracerProvider | None:
    """Install the process-wide tracer provider once; later calls only attach exporters."""
    global _provider

    if not settings.otel_enabled:
        return None

    if _provider is None:
        resource = Resource.create({"service.name": settings.otel_service_name, "deployment.environment": settings.app_env})
        _provider = TracerProvider(resource=resource)
        trace.set_tracer_provider(_provider)
        if settings.otel_console_exporter:
            _provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    if exporter is not None:
        _provider.add_span_processor(SimpleSpanProcessor(exporter))
    return _provider


def server_request_hook(span: Span | None, scope: dict[str, Any]) -> None:
    if span is None or not span.is_recording():
        return
    for name, value in scope.get("headers", []):
        if name == b"x-correlation-id":
            span.set_attribute("crm.correlation_id", value.decode("latin-1"))
            return
