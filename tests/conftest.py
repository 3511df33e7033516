"""Pytest fixtures and configuration for usersvc tests."""

import os

# Point the module-level engine at a throwaway database before usersvc is imported.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from usersvc.database.database import Base
from usersvc.database import models  # noqa: F401
from usersvc.database.user_repository import UserRepository


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite engine with a fresh users table."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for testing.

    StaticPool keeps a single connection, so the API and the test share one
    in-memory database.
    """
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_repository(db_session: Session):
    """Create a UserRepository instance for testing."""
    return UserRepository(db_session)


@pytest.fixture
def sample_user_payload():
    """Valid create payload."""
    return {"name": "Ada Lovelace", "email": "ada@example.com"}


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from usersvc.api.app import app
    from usersvc.database.database import get_db

    # Override the get_db dependency to use our test database session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    # Clean up dependency overrides
    app.dependency_overrides.clear()


@pytest.fixture
def created_user(test_client, sample_user_payload):
    """Create a user through the API and return the response body."""
    response = test_client.post("/users", json=sample_user_payload)
    assert response.status_code == 201
    return response.json()
