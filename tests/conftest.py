"""
Test configuration and fixtures for the Bookshelf API tests.
"""
import os

# Must be set before any bookshelf module reads the settings
os.environ["ENVIRONMENT"] = "testing"

import sqlite3
from datetime import date, timedelta
from typing import Any, Dict, Generator, List

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import AsyncClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bookshelf.core.auth import create_access_token
from bookshelf.core.config import settings
from bookshelf.core.database import Base, get_db
from bookshelf.crud.book import crud_book
from bookshelf.crud.reading_session import crud_reading_session
from bookshelf.crud.user import crud_user
from bookshelf.main import app
from bookshelf.models.book import Book
from bookshelf.models.reading_session import ReadingSession
from bookshelf.models.user import User
from bookshelf.schemas.book import BookCreate
from bookshelf.schemas.user import UserCreate

# Use in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

# Create test engine with foreign key support enabled
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={
        "check_same_thread": False,
    },
    poolclass=StaticPool,
    echo=False,
)


# Add event listener to enable foreign keys for each connection
@event.listens_for(Engine, "connect")
def enable_sqlite_fks(dbapi_connection, connection_record):
    """Enable foreign key constraints in SQLite."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create test session
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        # Drop tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session) -> Generator[TestClient, None, None]:
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


@pytest_asyncio.fixture
async def async_client(db_session):
    """Create an async test client."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        base_url="http://test", transport=httpx.ASGITransport(app=app)
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def absolute_policy(monkeypatch):
    """Run the test with the absolute merge policy configured."""
    monkeypatch.setattr(settings, "READING_SESSION_MERGE_POLICY", "absolute")
    return "absolute"


@pytest.fixture
def additive_policy(monkeypatch):
    """Run the test with the additive merge policy configured."""
    monkeypatch.setattr(settings, "READING_SESSION_MERGE_POLICY", "additive")
    return "additive"


@pytest.fixture
def today() -> date:
    return date.today()


@pytest.fixture
def test_user_data() -> Dict[str, Any]:
    """Test user data."""
    return {
        "email": "test@example.com",
        "username": "testuser",
        "full_name": "Test User",
        "password": "testpassword123",
        "is_active": True,
    }


@pytest.fixture
def test_user(db_session, test_user_data) -> User:
    """Create a test user."""
    user_in = UserCreate(**test_user_data)
    return crud_user.create(db_session, obj_in=user_in)


@pytest.fixture
def test_user_2(db_session) -> User:
    """Create a second test user."""
    user_in = UserCreate(
        email="user2@example.com",
        username="testuser2",
        full_name="Test User 2",
        password="testpass123",
        is_active=True,
    )
    return crud_user.create(db_session, obj_in=user_in)


@pytest.fixture
def inactive_user(db_session) -> User:
    user_in = UserCreate(
        email="inactive@example.com",
        username="inactiveuser",
        full_name="Inactive User",
        password="inactivepass123",
        is_active=False,
    )
    return crud_user.create(db_session, obj_in=user_in)


@pytest.fixture
def user_token(test_user: User) -> str:
    """Create access token for test user."""
    return create_access_token(test_user.id)


@pytest.fixture
def auth_headers(user_token: str) -> Dict[str, str]:
    """Create authorization headers for test user."""
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def user_2_headers(test_user_2: User) -> Dict[str, str]:
    """Create authorization headers for the second test user."""
    return {"Authorization": f"Bearer {create_access_token(test_user_2.id)}"}


@pytest.fixture
def test_book_data() -> Dict[str, Any]:
    """Test book data."""
    return {
        "title": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "genre": "Science Fiction",
        "status": "In Progress",
        "start_date": "2024-01-05",
        "rating": 4.5,
        "notes": "Winter is a planet",
        "quotes": ["Light is the left hand of darkness"],
    }


@pytest.fixture
def test_book(db_session, test_user, test_book_data) -> Book:
    """Create a test book owned by the test user."""
    book_in = BookCreate(**test_book_data)
    return crud_book.create_for_user(db_session, obj_in=book_in, user_id=test_user.id)


@pytest.fixture
def other_user_book(db_session, test_user_2) -> Book:
    """Create a book owned by the second user."""
    book_in = BookCreate(title="Dune", author="Frank Herbert", genre="Science Fiction")
    return crud_book.create_for_user(db_session, obj_in=book_in, user_id=test_user_2.id)


@pytest.fixture
def sample_sessions(db_session, test_user, today) -> List[ReadingSession]:
    """Three consecutive days ending today: 30, 45 and 20 minutes."""
    sessions = []
    for offset, minutes in ((0, 30), (1, 45), (2, 20)):
        sessions.append(
            crud_reading_session.create_session(
                db_session,
                user_id=test_user.id,
                date=today - timedelta(days=offset),
                minutes=minutes,
            )
        )
    return sessions


@pytest.fixture
def api_v1_prefix() -> str:
    """API v1 prefix."""
    return settings.API_V1_STR
