from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from enterprise_crm.metrics import observe_http_request, resolve_http_path_label


logger = logging.getLogger("enterprise_crm.request")


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status_code = 500
        failed = False
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception:
            failed = True
            raise
        finally:
            elapsed = time.perf_counter() - started
            # Route templates are only known after the router has matched.
            path = resolve_http_path_label(request)
            observe_http_request(request.method, path, status_code, elapsed)
            logger.log(
                _level_for(status_code),
                "http.error" if failed else "http.request",
                exc_info=failed,
                extra={
                    "method": request.method,
                    "path": path,
                    "status_code": status_code,
                    "duration_ms": round(elapsed * 1000, 2),
                },
            )
