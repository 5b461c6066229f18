"""
Database Configuration Module

This module sets up SQLAlchemy 2.0 as the entity store for the catalog.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives → create a new session
2. Use session for all database operations in that request
3. Commit on success, rollback on failure
4. Close session when request ends

GraphQL requests get their session through the context getter, which
depends on get_db() exactly like a REST route would. Tests override
get_db to point every request at an in-memory SQLite database.
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from catalog.config import get_settings

settings = get_settings()


def engine_options(database_url: str) -> dict[str, Any]:
    """
    Build create_engine() keyword arguments for a database URL.

    SQLite does not support the connection pool sizing options and needs
    check_same_thread disabled because the ASGI server hands sessions
    between threads.
    """
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}, "echo": settings.debug}

    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,  # Verify connections are alive before using
        "echo": settings.debug,  # Log SQL in debug mode
    }


# =============================================================================
# Database Engine
# =============================================================================
engine = create_engine(settings.database_url, **engine_options(settings.database_url))


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: We control when to commit
# - autoflush=False: Don't auto-flush before queries (more predictable behavior)
# - expire_on_commit=False: ORM objects stay readable after commit, which the
#   resolvers rely on when converting to GraphQL types
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic and create_tables() discover tables through Base.metadata.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, the request uses it, and the
    finally block closes it even when the request raised.

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    WARNING: In production, use Alembic migrations instead!
    """
    # Import models so every table is registered on Base.metadata
    import catalog.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def clear_tables(db: Session) -> None:
    """
    Delete every row from every table, children first.

    DANGER: Only reachable through the test reset route, which is not
    mounted in production.
    """
    import catalog.models  # noqa: F401

    for table in reversed(Base.metadata.sorted_tables):
        db.execute(table.delete())
    db.commit()
