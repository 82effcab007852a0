"""
Shared fixtures: in-memory SQLite database, users in each role, and an
authenticated TestClient.
"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mockhire.core.rate_limit import reset_rate_limits
from mockhire.core.security import hash_password, create_user_token
from mockhire.db.base import Base
from mockhire.db.models import User, UserRole
from mockhire.db.session import get_db
from mockhire.main import app
from mockhire.services import ledger_service


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# Fixed reference time for service-level tests
NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


def at(hours: float) -> datetime:
    """NOW shifted by a number of hours."""
    return NOW + timedelta(hours=hours)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


def _make_user(db, email: str, role: UserRole, full_name: str) -> User:
    user = User(
        full_name=full_name,
        email=email,
        password_hash=hash_password("testpass123"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def candidate(db):
    return _make_user(db, "candidate@example.com", UserRole.USER, "Casey Candidate")


@pytest.fixture
def interviewer(db):
    return _make_user(db, "interviewer@example.com", UserRole.INTERVIEWER, "Ivy Interviewer")


@pytest.fixture
def other_interviewer(db):
    return _make_user(db, "interviewer2@example.com", UserRole.INTERVIEWER, "Ian Interviewer")


@pytest.fixture
def admin(db):
    return _make_user(db, "admin@example.com", UserRole.ADMIN, "Ada Admin")


@pytest.fixture
def fund(db):
    """Grant points to a user and commit."""
    def _fund(user, amount: int):
        ledger_service.earn(db, user.id, amount, "Test grant")
        db.commit()
    return _fund


@pytest.fixture
def client(db):
    """TestClient wired to the test database."""
    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    reset_rate_limits()
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        reset_rate_limits()


def auth_headers(user) -> dict:
    token = create_user_token(user.id, UserRole(user.role).value)
    return {"Authorization": f"Bearer {token}"}
