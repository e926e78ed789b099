from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fastapi import HTTPException, status
from jose import JWTError, jwt
from starlette.requests import Request

from enterprise_crm.core.config import Settings, get_settings


SYSTEM_ACTOR = "System"


@dataclass
class AuthUser:
    sub: str
    name: str
    roles: list[str] = field(default_factory=list)

    @property
    def actor(self) -> str:
        return self.name or SYSTEM_ACTOR


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Decode and verify a bearer token.

    Signature, expiry, issuer and audience are all checked; any failure
    surfaces as ``JWTError``.
    """
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )


def bearer_token(request: Request) -> str:
    auth_header = request.headers.get("authorization", "")
    if not auth_header.lower().startswith("bearer "):
        return ""
    return auth_header[7:].strip()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(request: Request) -> AuthUser:
    token = bearer_token(request)
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_access_token(token, get_settings())
    except JWTError:
        raise _unauthorized("Invalid or expired token")

    roles = payload.get("roles", [])
    if not isinstance(roles, list):
        roles = [roles]
    return AuthUser(
        sub=str(payload.get("sub", "")),
        name=str(payload.get("name") or SYSTEM_ACTOR),
        roles=[str(role) for role in roles],
    )
