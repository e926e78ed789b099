from __future__ import annotations

import re

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.requests import Request


http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

crm_entity_writes_total = Counter(
    "crm_entity_writes_total",
    "Total CRM entity writes by entity and operation",
    ["entity", "operation"],
)

auth_logins_total = Counter(
    "auth_logins_total",
    "Login attempts by outcome",
    ["outcome"],
)


_INT_SEGMENT_RE = re.compile(r"/\d+(?=/|$)")


def resolve_http_path_label(request: Request) -> str:
    route = request.scope.get("route")
    route_path = getattr(route, "path", None) if route is not None else None
    if isinstance(route_path, str) and route_path:
        return route_path
    return _INT_SEGMENT_RE.sub("/{id}", request.url.path)


def observe_http_request(method: str, path: str, status: int, duration: float) -> None:
    http_requests_total.labels(method=method, path=path, status=str(status)).inc()
    http_request_duration_seconds.labels(method=method, path=path).observe(duration)


def observe_entity_write(entity: str, operation: str) -> None:
    crm_entity_writes_total.labels(entity=entity, operation=operation).inc()


def observe_login(outcome: str) -> None:
    auth_logins_total.labels(outcome=outcome).inc()


def generate_metrics_payload() -> bytes:
    return generate_latest()


def metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
