"""Pytest configuration and fixtures.

Provides:
- An in-memory SQLite database per test, with foreign keys enforced
- Principals backed by provisioned user rows
- A FastAPI test client wired to the same database
"""

import os
import uuid
from typing import Callable, Generator

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from core.database import Base, get_db
from core.security import ANONYMOUS, Principal, create_access_token
from main import app
from repositories.user_repo import UserRepository

SOURCE_TEXT = "x" * 1000


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_principal(db: Session) -> Callable[[], Principal]:
    """Create a user row and return a principal acting as that user."""

    def _make() -> Principal:
        principal = Principal(user_id=uuid.uuid4())
        UserRepository(db, principal).ensure()
        return principal

    return _make


@pytest.fixture
def alice(make_principal) -> Principal:
    return make_principal()


@pytest.fixture
def bob(make_principal) -> Principal:
    return make_principal()


@pytest.fixture
def anonymous() -> Principal:
    return ANONYMOUS


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


def auth_headers(principal: Principal) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(str(principal.user_id))}"}
