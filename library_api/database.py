"""
Database Configuration Module

SQLAlchemy 2.0 setup for the catalog store.

Session Management Pattern
==========================
Every GraphQL operation gets its own session ("session per request"):
1. Request (or WebSocket connection) arrives -> create a session
2. Resolvers read and write through that session
3. Mutations commit once per operation, rolling back on failure
4. The session is closed when the request ends

The session is handed to the GraphQL context through FastAPI's
dependency injection (see get_db below), which is also what the test
suite overrides to point at an in-memory database.
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from library_api.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# SQLite does not accept pool sizing arguments and refuses cross-thread use
# of a connection by default, so it gets its own engine options.

def _engine_options(database_url: str) -> dict[str, Any]:
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url),
)


# =============================================================================
# Session Factory
# =============================================================================
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic reads Base.metadata to discover the tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a new session and closes it when the request (or the
    subscription's WebSocket connection) ends, even if an exception
    occurred.

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

    Handy for development and the seed script. Deployed databases should
    be created with `alembic upgrade head` instead.
    """
    Base.metadata.create_all(bind=engine)



def drop_tables() -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Used by the seed script to reset a
    development database. Never point it at production.
    """
    Base.metadata.drop_all(bind=engine)
