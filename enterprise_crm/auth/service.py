from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, NoReturn

from jose import JWTError, jwt

from enterprise_crm.auth.schemas import LoginResponse
from enterprise_crm.core.auth import decode_access_token
from enterprise_crm.core.config import Settings
from enterprise_crm.core.security import hash_password, verify_password
from enterprise_crm.crm.models import User, utcnow
from enterprise_crm.crm.schemas import UserRead
from enterprise_crm.crm.unit_of_work import UnitOfWork
from enterprise_crm.errors import InvalidCredentialsError
from enterprise_crm.metrics import observe_login


logger = logging.getLogger("enterprise_crm.auth")


class AuthenticationService:
    """Credential checks and bearer-token issuance for CRM users."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def login(self, uow: UnitOfWork, username: str, password: str) -> LoginResponse:
        user = uow.users.get_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            self._reject(username, "invalid_credentials")
        if user.status != "Active":
            self._reject(username, "inactive_user")

        user.last_login_date = utcnow()
        uow.users.update(user)
        uow.save_changes()

        token, expires_at = self.generate_token(user)
        observe_login("success")
        logger.info("auth.login", extra={"username": user.username, "entity_id": user.id})
        return LoginResponse(token=token, expires_at=expires_at, user=UserRead.model_validate(user))

    def _reject(self, username: str, reason: str) -> NoReturn:
        observe_login("failure")
        logger.warning("auth.login_failed", extra={"username": username, "reason": reason})
        raise InvalidCredentialsError()

    def generate_token(self, user: User) -> tuple[str, datetime]:
        expires_at = utcnow() + timedelta(minutes=self.settings.jwt_expiry_minutes)
        claims: dict[str, Any] = {
            "sub": str(user.id),
            "name": user.username,
            "email": user.email,
            "roles": [user.role],
            "first_name": user.first_name,
            "last_name": user.last_name,
            "department": user.department or "",
            "job_title": user.job_title or "",
            "iss": self.settings.jwt_issuer,
            "aud": self.settings.jwt_audience,
            "exp": expires_at,
        }
        token = jwt.encode(claims, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm)
        return token, expires_at

    def validate_token(self, token: str) -> bool:
        try:
            decode_access_token(token, self.settings)
        except JWTError:
            return False
        return True

    def get_user_from_token(self, uow: UnitOfWork, token: str) -> UserRead | None:
        try:
            payload = decode_access_token(token, self.settings)
        except JWTError:
            return None
        try:
            user_id = int(payload.get("sub", ""))
        except ValueError:
            return None
        user = uow.users.get_by_id(user_id)
        return UserRead.model_validate(user) if user is not None else None

    def change_password(self, uow: UnitOfWork, user_id: int, current_password: str, new_password: str) -> bool:
        user = uow.users.get_by_id(user_id)
        if user is None or not verify_password(current_password, user.password_hash):
            return False

        user.password_hash = hash_password(new_password)
        user.updated_at = utcnow()
        user.updated_by = user.username
        uow.users.update(user)
        uow.save_changes()
        logger.info("auth.password_changed", extra={"username": user.username, "entity_id": user.id})
        return True
