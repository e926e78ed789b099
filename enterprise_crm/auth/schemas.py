from __future__ import annotations

from pydantic import Field

from enterprise_crm.crm.schemas import CRMSchema, UserRead, UtcDatetime


class LoginRequest(CRMSchema):
    username: str = Field(min_length=1, max_length=100)
    password: str = Field(min_length=1, max_length=128)


class LoginResponse(CRMSchema):
    token: str
    expires_at: UtcDatetime
    user: UserRead


class TokenValidationResponse(CRMSchema):
    valid: bool
    user: UserRead


class ChangePasswordRequest(CRMSchema):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)


class MessageResponse(CRMSchema):
    message: str
