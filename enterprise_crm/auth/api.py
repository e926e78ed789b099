from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from enterprise_crm.api.deps import get_uow
from enterprise_crm.api.errors import bad_request, error_response
from enterprise_crm.auth.schemas import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    TokenValidationResponse,
)
from enterprise_crm.auth.service import AuthenticationService
from enterprise_crm.core.auth import AuthUser, bearer_token, get_current_user
from enterprise_crm.core.config import get_settings
from enterprise_crm.crm.unit_of_work import UnitOfWork

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_auth_service() -> AuthenticationService:
    return AuthenticationService(get_settings())


@router.post("/login", response_model=LoginResponse)
def login(
    dto: LoginRequest,
    uow: UnitOfWork = Depends(get_uow),
    auth_service: AuthenticationService = Depends(get_auth_service),
) -> LoginResponse:
    return auth_service.login(uow, dto.username, dto.password)


@router.post("/validate", response_model=TokenValidationResponse)
def validate(
    request: Request,
    uow: UnitOfWork = Depends(get_uow),
    auth_service: AuthenticationService = Depends(get_auth_service),
    _: AuthUser = Depends(get_current_user),
) -> TokenValidationResponse | JSONResponse:
    token = bearer_token(request)
    user = auth_service.get_user_from_token(uow, token)
    if user is None:
        return error_response(
            request,
            status_code=status.HTTP_401_UNAUTHORIZED,
            code="unauthorized",
            message="User not found",
        )
    return TokenValidationResponse(valid=True, user=user)


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    request: Request,
    dto: ChangePasswordRequest,
    uow: UnitOfWork = Depends(get_uow),
    auth_service: AuthenticationService = Depends(get_auth_service),
    user: AuthUser = Depends(get_current_user),
) -> MessageResponse | JSONResponse:
    user_id = int(user.sub) if user.sub.isdigit() else 0
    if not auth_service.change_password(uow, user_id, dto.current_password, dto.new_password):
        return bad_request(request, "Current password is incorrect")
    return MessageResponse(message="Password changed successfully")
