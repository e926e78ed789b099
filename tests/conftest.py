from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from enterprise_crm.auth.service import AuthenticationService
from enterprise_crm.core.config import get_settings
from enterprise_crm.core.database import Base, build_session_factory, get_db
from enterprise_crm.crm.models import User
from enterprise_crm.crm.unit_of_work import UnitOfWork
from enterprise_crm.main import app


@pytest.fixture()
def session_factory() -> Generator[sessionmaker[Session], None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield build_session_factory(engine)
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def uow(db_session: Session) -> UnitOfWork:
    return UnitOfWork(db_session)


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers() -> Callable[..., dict[str, str]]:
    """Bearer headers for a token signed with the app's own settings."""

    def build(role: str = "Admin", username: str = "admin", user_id: int = 1) -> dict[str, str]:
        user = User(
            id=user_id,
            username=username,
            email=f"{username}@example.com",
            first_name=username.title(),
            last_name="Tester",
            role=role,
        )
        token, _ = AuthenticationService(get_settings()).generate_token(user)
        return {"Authorization": f"Bearer {token}"}

    return build
