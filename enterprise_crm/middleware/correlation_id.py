from __future__ import annotations

import uuid

from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from enterprise_crm.context import correlation_scope


CORRELATION_HEADER = "x-correlation-id"
_INBOUND_HEADERS = (CORRELATION_HEADER, "x-request-id")
_MAX_INBOUND_LENGTH = 128


def resolve_correlation_id(request: Request) -> str:
    inbound = (request.headers.get(name, "").strip() for name in _INBOUND_HEADERS)
    return next((value[:_MAX_INBOUND_LENGTH] for value in inbound if value), None) or uuid.uuid4().hex


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Echoes the caller's correlation id, or a fresh one, on every CRM response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        correlation_id = resolve_correlation_id(request)
        request.state.correlation_id = correlation_id

        span = trace.get_current_span()
        if span.is_recording():
            span.set_attribute("crm.correlation_id", correlation_id)

        with correlation_scope(correlation_id):
            response = await call_next(request)

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
