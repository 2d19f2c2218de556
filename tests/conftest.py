"""
Test configuration and fixtures for Who's for Dinner.

- A fresh in-memory SQLite database per test (or TEST_DATABASE_URL)
- TestClient with database dependency override
- Authenticated client fixture carrying a valid session cookie
- Photo store pointed at a temporary directory
"""

import os
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models import Session as UserSession
from app.services.file_service import FileService
from tests.factories import create_session

TEST_PIN = "2468"


# =============================================================================
# Database Fixtures
# =============================================================================


def get_test_database_url() -> str:
    """
    Get the test database URL.

    TEST_DATABASE_URL wins; otherwise every test gets its own in-memory
    SQLite database, so no cleanup between tests is needed.
    """
    return os.environ.get("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture
def test_engine():
    """Create the schema on a fresh engine and drop it afterwards."""
    database_url = get_test_database_url()

    if database_url.startswith("sqlite"):
        # One shared connection so the in-memory database survives across threads
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(database_url)

    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(test_engine) -> Generator[Session, None, None]:
    """Provide a database session bound to the per-test engine."""
    TestingSessionLocal = sessionmaker(bind=test_engine, autoflush=False)
    session = TestingSessionLocal()

    yield session

    session.close()


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def household_pin(monkeypatch) -> str:
    """Configure a known plaintext PIN for every test."""
    monkeypatch.setattr(settings, "pin", TEST_PIN)
    monkeypatch.setattr(settings, "pin_hash", "")
    return TEST_PIN


@pytest.fixture
def photo_store(tmp_path, monkeypatch) -> FileService:
    """Photo store in a temporary directory, wired into the API modules."""
    store = FileService(upload_dir=str(tmp_path / "meal-photos"))
    monkeypatch.setattr("app.api.meals.file_service", store)
    monkeypatch.setattr("app.api.photos.file_service", store)
    return store


# =============================================================================
# TestClient Fixtures
# =============================================================================


def _override_db(db: Session):
    def override_get_db():
        try:
            yield db
        finally:
            pass  # Don't close - managed by db fixture

    return override_get_db


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """
    TestClient with database dependency override.

    The database session is injected into the app's get_db dependency.
    """
    app.dependency_overrides[get_db] = _override_db(db)

    with TestClient(app) as test_client:
        # Set default Referer so CSRF Origin middleware allows requests
        test_client.headers["referer"] = "http://testserver/"
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def test_session(db: Session) -> UserSession:
    """A valid session row."""
    return create_session(db)


@pytest.fixture
def auth_client(
    db: Session, test_session: UserSession
) -> Generator[TestClient, None, None]:
    """
    Logged-in TestClient.

    Creates a separate TestClient instance to avoid cookie conflicts.
    """
    app.dependency_overrides[get_db] = _override_db(db)

    with TestClient(app) as test_client:
        test_client.cookies.set(settings.session_cookie_name, test_session.token)
        # Set default Referer so CSRF Origin middleware allows requests
        test_client.headers["referer"] = "http://testserver/"
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# pytest markers
# =============================================================================


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
