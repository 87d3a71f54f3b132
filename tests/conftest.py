"""
pytest Fixtures for Library GraphQL API Tests

Shared fixtures used across all test files.

For database tests, we use:
- session scope for the engine (tables are created once)
- function scope for sessions (every test starts with empty tables)
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
import os

os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SHARED_PASSWORD"] = "secred"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from library_api.database import Base, get_db
from library_api.main import app
from library_api.models import Author, Book, Genre, User
from library_api.services.security import create_user_token

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory: fast, isolated, no external database needed.
# StaticPool keeps the single connection (and so the data) alive between
# the test thread and the TestClient's event loop thread.


@pytest.fixture(scope="session")
def engine():
    """Create a SQLite in-memory database engine with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Mutations commit (and roll back on failure) for real, so isolation
    comes from emptying every table after the test instead of an outer
    transaction.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    get_db is overridden so the GraphQL context (for both HTTP requests
    and subscription WebSockets) uses the test session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    # Entering the client runs the lifespan, which creates the event bus
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SESSION-PER-REQUEST FIXTURES
# =============================================================================
# Subscriptions keep one session open for a whole WebSocket connection while
# HTTP requests come and go. To test that the way it runs in production,
# these fixtures use a file database with a real connection pool and give
# every request (and every WebSocket) its own session.


@pytest.fixture
def file_engine(tmp_path) -> Generator[Engine, None, None]:
    """A pooled SQLite engine on a temporary database file, with all tables."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'library.db'}",
        connect_args={"check_same_thread": False},
        pool_size=2,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    engine.dispose()


@pytest.fixture
def file_sessions(file_engine: Engine) -> sessionmaker:
    """Session factory bound to file_engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=file_engine)


@pytest.fixture
def isolated_client(file_sessions: sessionmaker) -> Generator[TestClient, None, None]:
    """Test client whose get_db opens a new session on every call."""

    def override_get_db():
        db = file_sessions()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def isolated_token(file_sessions: sessionmaker) -> str:
    """A valid bearer token for a user stored in file_engine."""
    with file_sessions() as db:
        user = User(username="mluukkai", favorite_genre="refactoring")
        db.add(user)
        db.commit()
        return create_user_token(user)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    user = User(username="mluukkai", favorite_genre="refactoring")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_token(sample_user: User) -> str:
    """A valid bearer token for sample_user."""
    return create_user_token(sample_user)


@pytest.fixture
def sample_author(db_session: Session) -> Author:
    """Create a sample author for testing."""
    author = Author(name="Martin Fowler", born=1963)
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def sample_book(db_session: Session, sample_author: Author) -> Book:
    """Create a sample book by sample_author tagged 'refactoring'."""
    book = Book(
        title="Refactoring, edition 2",
        published=2018,
        author=sample_author,
        genres=[Genre(name="refactoring")],
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def catalog(db_session: Session) -> dict[str, Author]:
    """
    A small catalog: three authors, five books, overlapping genres.

    Returns:
        Authors by name
    """
    genres = {name: Genre(name=name) for name in ("refactoring", "agile", "patterns", "design", "crime")}
    fowler = Author(name="Martin Fowler", born=1963)
    martin = Author(name="Robert Martin", born=1952)
    dostoevsky = Author(name="Fyodor Dostoevsky", born=1821)

    books = [
        Book(title="Clean Code", published=2008, author=martin,
             genres=[genres["refactoring"]]),
        Book(title="Agile software development", published=2002, author=martin,
             genres=[genres["agile"], genres["patterns"], genres["design"]]),
        Book(title="Refactoring, edition 2", published=2018, author=fowler,
             genres=[genres["refactoring"]]),
        Book(title="Crime and punishment", published=1866, author=dostoevsky,
             genres=[genres["crime"]]),
        Book(title="Refactoring to patterns", published=2008, author=fowler,
             genres=[genres["refactoring"], genres["patterns"]]),
    ]
    db_session.add_all(books)
    db_session.commit()

    return {author.name: author for author in (fowler, martin, dostoevsky)}
