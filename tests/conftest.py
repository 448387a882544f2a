import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("ENABLE_SCHEDULER", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth import create_access_token, hash_password
from app.db import Base, get_db
from app.main import app
from app.models.user import User
from app.store import RecordStore


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(db_session):
    return RecordStore(db_session)


@pytest.fixture
def test_user(db_session):
    user = User(
        email="owner@example.com",
        hashed_password=hash_password("password123!"),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def client(db_session):
    """Create a test client with database session override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _authenticated_client(db_session, email):
    user = User(
        email=email,
        hashed_password=hash_password("password123!"),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)

    # sub must be a string
    token = create_access_token(data={"sub": str(user.id)})

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    test_client.headers["Authorization"] = f"Bearer {token}"
    test_client.test_user = user  # Attach user for assertions
    return test_client


@pytest.fixture
def auth_client(db_session):
    """Create a test client with an authenticated user."""
    with _authenticated_client(db_session, "test@example.com") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def second_auth_client(db_session):
    """Create a test client with a second authenticated user (for isolation tests)."""
    with _authenticated_client(db_session, "second@example.com") as test_client:
        yield test_client
    app.dependency_overrides.clear()
