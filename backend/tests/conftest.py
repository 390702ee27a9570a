"""
Shared fixtures: a fresh in-memory SQLite database per test, a session on it, and a TestClient
whose get_db points at the same database. DATABASE_URL is set before nuclear is imported so the
module-level engine never creates a file.
"""
import os
import uuid

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import nuclear.models  # noqa: F401  (register tables on Base)
from nuclear.database import Base, get_db
from nuclear.main import app
from nuclear.models.types import UserMode
from nuclear.ratelimit import FixedWindowRateLimiter, MemoryRateLimitStore
from nuclear.services import users as user_service
from nuclear.services.auth import create_access_token


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def limiter():
    """Generous limiter so ordinary API tests never hit 429; rate-limit tests replace it."""
    return FixedWindowRateLimiter(MemoryRateLimitStore(), limit=1000, window_seconds=60)


@pytest.fixture
def client(session_factory, limiter):
    """TestClient with get_db overridden to use the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    previous = app.state.rate_limiter
    app.dependency_overrides[get_db] = override_get_db
    app.state.rate_limiter = limiter
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
        app.state.rate_limiter = previous


@pytest.fixture
def make_user(db):
    """Factory: make_user(mode="ADMIN", name="...") creates and commits a user with a unique email."""

    def _make(mode: str = UserMode.STUDENT.value, **fields):
        data = {"email": f"user-{uuid.uuid4().hex[:8]}@example.com", "mode": mode}
        data.update(fields)
        return user_service.create_user(db, data)

    return _make


@pytest.fixture
def auth_headers():
    """auth_headers(user) -> Authorization header with a valid bearer token for user."""

    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.mode)}"}

    return _headers
