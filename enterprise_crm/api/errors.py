from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

from enterprise_crm.context import current_correlation_id
from enterprise_crm.errors import EntityNotFoundError, InvalidCredentialsError


@dataclass
class ErrorEnvelope:
    code: str
    message: str
    details: Any
    correlation_id: str | None


def error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any = None,
) -> JSONResponse:
    correlation_id = current_correlation_id() or getattr(request.state, "correlation_id", None)
    payload = ErrorEnvelope(code=code, message=message, details=details, correlation_id=correlation_id)
    return JSONResponse(status_code=status_code, content=asdict(payload))


def bad_request(request: Request, message: str, details: Any = None) -> JSONResponse:
    return error_response(
        request,
        status_code=status.HTTP_400_BAD_REQUEST,
        code="bad_request",
        message=message,
        details=details,
    )


async def entity_not_found_handler(request: Request, exc: EntityNotFoundError) -> JSONResponse:
    return error_response(
        request,
        status_code=status.HTTP_404_NOT_FOUND,
        code="not_found",
        message=str(exc),
        details={"entity": exc.entity, "id": exc.entity_id},
    )


async def invalid_credentials_handler(request: Request, exc: InvalidCredentialsError) -> JSONResponse:
    return error_response(
        request,
        status_code=status.HTTP_401_UNAUTHORIZED,
        code="invalid_credentials",
        message=str(exc),
    )
