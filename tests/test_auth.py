from __future__ import annotations

import logging
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from enterprise_crm.auth.service import AuthenticationService
from enterprise_crm.core.config import Settings, get_settings
from enterprise_crm.crm.models import utcnow
from enterprise_crm.crm.schemas import UserCreate
from enterprise_crm.crm.service import user_service
from enterprise_crm.crm.unit_of_work import UnitOfWork
from enterprise_crm.errors import InvalidCredentialsError


PASSWORD = "correct-horse-battery"


@pytest.fixture()
def settings() -> Settings:
    return get_settings()


@pytest.fixture()
def auth_service(settings: Settings) -> AuthenticationService:
    return AuthenticationService(settings)


def _seed_user(uow: UnitOfWork, username: str = "jane", status: str = "Active", role: str = "Manager") -> int:
    created = user_service.create(
        uow,
        UserCreate(
            first_name="Jane",
            last_name="Doe",
            email=f"{username}@example.com",
            username=username,
            password=PASSWORD,
            role=role,
            status=status,
            department="Sales",
        ),
        "System",
    )
    return created.id


def test_login_issues_token_with_user_claims(
    uow: UnitOfWork, auth_service: AuthenticationService, settings: Settings
) -> None:
    user_id = _seed_user(uow)

    result = auth_service.login(uow, "jane", PASSWORD)

    claims = jwt.decode(
        result.token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
    )
    assert claims["sub"] == str(user_id)
    assert claims["name"] == "jane"
    assert claims["email"] == "jane@example.com"
    assert claims["roles"] == ["Manager"]
    assert claims["department"] == "Sales"
    assert claims["job_title"] == ""
    assert result.user.id == user_id
    assert result.user.last_login_date is not None
    assert claims["exp"] == int(result.expires_at.timestamp())
    assert result.expires_at - timedelta(minutes=settings.jwt_expiry_minutes) <= utcnow()


def test_login_rejects_wrong_password_and_logs(
    uow: UnitOfWork, auth_service: AuthenticationService, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.WARNING, logger="enterprise_crm.auth")
    _seed_user(uow)

    with pytest.raises(InvalidCredentialsError):
        auth_service.login(uow, "jane", "wrong")
    with pytest.raises(InvalidCredentialsError):
        auth_service.login(uow, "nobody", PASSWORD)

    reasons = [getattr(record, "reason", None) for record in caplog.records if record.getMessage() == "auth.login_failed"]
    assert reasons == ["invalid_credentials", "invalid_credentials"]


def test_login_rejects_inactive_user(uow: UnitOfWork, auth_service: AuthenticationService) -> None:
    _seed_user(uow, username="sleepy", status="Suspended")

    with pytest.raises(InvalidCredentialsError):
        auth_service.login(uow, "sleepy", PASSWORD)


def test_validate_token_checks_signature_and_audience(
    uow: UnitOfWork, auth_service: AuthenticationService, settings: Settings
) -> None:
    _seed_user(uow)
    token = auth_service.login(uow, "jane", PASSWORD).token

    assert auth_service.validate_token(token) is True
    assert auth_service.validate_token("not-a-token") is False

    foreign = AuthenticationService(settings.model_copy(update={"jwt_audience": "SomeoneElse"}))
    assert foreign.validate_token(token) is False

    forged = AuthenticationService(settings.model_copy(update={"jwt_secret": "another-secret"}))
    assert forged.validate_token(token) is False


def test_expired_token_is_invalid(uow: UnitOfWork, settings: Settings) -> None:
    _seed_user(uow)
    expired_service = AuthenticationService(settings.model_copy(update={"jwt_expiry_minutes": -1}))
    token = expired_service.login(uow, "jane", PASSWORD).token

    assert AuthenticationService(settings).validate_token(token) is False


def test_get_user_from_token(uow: UnitOfWork, auth_service: AuthenticationService) -> None:
    user_id = _seed_user(uow)
    token = auth_service.login(uow, "jane", PASSWORD).token

    user = auth_service.get_user_from_token(uow, token)

    assert user is not None
    assert user.id == user_id
    assert auth_service.get_user_from_token(uow, "garbage") is None


def test_change_password(uow: UnitOfWork, auth_service: AuthenticationService) -> None:
    user_id = _seed_user(uow)

    assert auth_service.change_password(uow, user_id, "wrong", "new-password-1") is False
    assert auth_service.change_password(uow, 999, PASSWORD, "new-password-1") is False
    assert auth_service.change_password(uow, user_id, PASSWORD, "new-password-1") is True

    with pytest.raises(InvalidCredentialsError):
        auth_service.login(uow, "jane", PASSWORD)
    assert auth_service.login(uow, "jane", "new-password-1").user.id == user_id


def test_login_endpoint_round_trip(client: TestClient, uow: UnitOfWork) -> None:
    _seed_user(uow, role="ReadOnly")

    response = client.post("/api/auth/login", json={"username": "jane", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["username"] == "jane"
    assert "expiresAt" in body

    headers = {"Authorization": f"Bearer {body['token']}"}
    assert client.get("/api/customers", headers=headers).status_code == 200
    assert client.post("/api/customers", json={"companyName": "X", "email": "x@example.com"}, headers=headers).status_code == 403

    validated = client.post("/api/auth/validate", headers=headers)
    assert validated.status_code == 200
    assert validated.json()["valid"] is True
    assert validated.json()["user"]["username"] == "jane"


def test_login_endpoint_rejects_bad_credentials(client: TestClient, uow: UnitOfWork) -> None:
    _seed_user(uow)

    response = client.post("/api/auth/login", json={"username": "jane", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["code"] == "invalid_credentials"
    assert response.json()["message"] == "Invalid username or password"


def test_change_password_endpoint(client: TestClient, uow: UnitOfWork) -> None:
    _seed_user(uow)
    token = client.post("/api/auth/login", json={"username": "jane", "password": PASSWORD}).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    wrong = client.post(
        "/api/auth/change-password",
        json={"currentPassword": "nope", "newPassword": "brand-new-pass"},
        headers=headers,
    )
    assert wrong.status_code == 400

    ok = client.post(
        "/api/auth/change-password",
        json={"currentPassword": PASSWORD, "newPassword": "brand-new-pass"},
        headers=headers,
    )
    assert ok.status_code == 200
    assert ok.json()["message"] == "Password changed successfully"
    assert client.post("/api/auth/login", json={"username": "jane", "password": "brand-new-pass"}).status_code == 200


def test_validate_endpoint_requires_token(client: TestClient) -> None:
    assert client.post("/api/auth/validate").status_code == 401
