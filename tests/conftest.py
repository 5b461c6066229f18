"""
pytest Fixtures for Book Catalog Tests

This file contains shared fixtures used across all test files.

FIXTURE SCOPES:
- function (default): New instance per test function

Every test gets its own in-memory SQLite engine, its own event bus and its
own application instance, so tests never see each other's rows or events.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# Tables are created per test below, never on the configured database.
import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DATABASE_AUTO_CREATE"] = "false"
os.environ["JWT_SECRET"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from catalog.database import Base, get_db
from catalog.main import create_app
from catalog.models import Author, Book, User
from catalog.services.authors import find_or_increment_author
from catalog.services.events import EventBus
from catalog.services.images import ImageStore
from catalog.services.security import create_user_token, hash_password

TEST_PASSWORD = "testPassword"

# Books used throughout the integration tests
CATALOG_BOOKS = [
    {
        "title": "Oddly Normal",
        "author": "Jack Swanson",
        "published": 2010,
        "genres": ["Fantasy", "Horror"],
    },
    {
        "title": "Even Stranger",
        "author": "Jack Swanson",
        "published": 2011,
        "genres": ["Fantasy", "Horror"],
    },
    {
        "title": "The Oddest",
        "author": "Jack Swanson",
        "published": 2012,
        "genres": ["Fantasy", "Horror"],
    },
    {
        "title": "Swamp Thing",
        "author": "Alan Moore",
        "published": 1984,
        "genres": ["Horror", "Sci-Fi"],
    },
    {
        "title": "The great amazonian jungle",
        "author": "Jack Swanson",
        "published": 2015,
        "genres": ["Nature", "Adventure"],
    },
]


# =============================================================================
# Helper Functions
# =============================================================================


def graphql_query(
    client: TestClient,
    query: str,
    variables: dict | None = None,
    token: str | None = None,
) -> dict:
    """Execute a GraphQL operation and return the decoded response body."""
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"bearer {token}"

    payload = {"query": query}
    if variables:
        payload["variables"] = variables

    response = client.post("/graphql", json=payload, headers=headers)
    return response.json()


def get_auth_token(user: User) -> str:
    """Generate a login token for a user."""
    return create_user_token(user.id, user.username)


def error_code(result: dict) -> str:
    """The code of the first GraphQL error in a response."""
    return result["errors"][0]["extensions"]["code"]


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """
    Create a SQLite in-memory database engine with all tables.

    StaticPool keeps the single connection alive for the whole test.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine: Engine) -> Generator[Session, None, None]:
    """Create a database session bound to the test engine."""
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================


@pytest.fixture
def event_bus() -> EventBus:
    """An event bus that records everything published on it."""
    return EventBus(record_history=True)


@pytest.fixture
def image_store() -> ImageStore:
    """An image store with tiny chunks so uploads span several rows."""
    return ImageStore(chunk_size=8, max_size=1024)


@pytest.fixture
def app(event_bus: EventBus, image_store: ImageStore) -> FastAPI:
    """A fresh application wired to the test event bus and image store."""
    return create_app(event_bus=event_bus, image_store=image_store)


@pytest.fixture
def client(app: FastAPI, db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency so HTTP routes and the GraphQL
    context both use the test session.
    """

    def override_get_db():
        """Provide test database session instead of real one."""
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    user = User(
        username="testUser1",
        password_hash=hash_password(TEST_PASSWORD),
        favorite_genre="Horror",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_token(sample_user: User) -> str:
    """A valid login token for sample_user."""
    return get_auth_token(sample_user)


@pytest.fixture
def sample_author(db_session: Session) -> Author:
    """Create an author with no books."""
    author = Author(name="Ursula Le Guin", born=1929, book_count=0)
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def catalog_books(db_session: Session) -> list[Book]:
    """
    Insert the catalog books the same way addBook does.

    Authors are created on demand and their stored bookCount ends up at
    the number of books inserted for them.
    """
    books = []
    for data in CATALOG_BOOKS:
        author = find_or_increment_author(db_session, data["author"])
        book = Book(
            title=data["title"],
            published=data["published"],
            author=author,
            genres=list(data["genres"]),
        )
        db_session.add(book)
        db_session.commit()
        books.append(book)
    return books
