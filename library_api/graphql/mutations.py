"""
GraphQL Mutation Resolvers

Defines all write operations (mutations) for the GraphQL API.

addBook and editAuthor require a bearer token; createUser and login
do not. Every mutation either commits once or leaves the database
untouched.
"""

import logging
from typing import Any

import strawberry
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext, require_auth
from library_api.graphql.errors import UserInputError, format_validation_error
from library_api.graphql.queries import (
    author_to_graphql,
    book_query,
    book_to_graphql,
    user_to_graphql,
)
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import Token, UserType
from library_api.models import Author, Book, Genre, User
from library_api.schemas import AuthorCreate, AuthorUpdate, BookCreate, UserCreate
from library_api.services.events import EventType
from library_api.services.security import check_shared_password, create_user_token

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================


def validate(schema: type, data: dict[str, Any]) -> tuple[Any, ValidationError | None]:
    """
    Validate data against a Pydantic schema without raising.

    Returns:
        (validated model, None) on success, (None, error) on failure
    """
    try:
        return schema(**data), None
    except ValidationError as e:
        return None, e


def commit_or_raise(db: Session, args: dict[str, Any]) -> None:
    """
    Commit the session, turning database failures into input errors.

    Everything pending in the session is rolled back on failure, so a
    failed mutation never leaves partial writes behind.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Constraint violation: {e.orig}")
        raise UserInputError(
            "A record with the same unique value already exists",
            invalid_args=args,
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error: {e}")
        raise UserInputError(str(e), invalid_args=args) from e


def get_or_create_genres(db: Session, names: list[str]) -> list[Genre]:
    """Look up genre tags by name, creating (but not committing) missing ones."""
    if not names:
        return []

    existing = {
        genre.name: genre
        for genre in db.execute(select(Genre).where(Genre.name.in_(names))).scalars()
    }
    genres = []
    for name in names:
        genre = existing.get(name)
        if genre is None:
            genre = Genre(name=name)
            db.add(genre)
        genres.append(genre)
    return genres


def save_book(
    db: Session,
    title: str,
    author: str,
    published: int,
    genres: list[str | None],
) -> BookType:
    """
    Validate and store a book, creating its author if needed.

    Blocking; addBook runs it in the threadpool. The book and a would-be
    new author are both validated before anything is written, and the
    book, its genre tags, a new author and the author's book list are
    committed in one transaction.

    Returns:
        The stored book with its author and tags loaded

    Raises:
        UserInputError: If validation or the commit fails
    """
    args = {
        "title": title,
        "author": author,
        "published": published,
        "genres": genres,
    }

    existing_author = db.execute(
        select(Author)
        .options(selectinload(Author.books))
        .where(Author.name == author.strip())
    ).scalar_one_or_none()

    book_data, book_error = validate(
        BookCreate,
        {"title": title, "published": published, "genres": genres},
    )
    author_data, author_error = validate(
        AuthorCreate,
        {
            "name": author,
            "born": existing_author.born if existing_author else None,
        },
    )
    for error in (book_error, author_error):
        if error:
            raise UserInputError(format_validation_error(error), invalid_args=args)

    book_author = existing_author
    if book_author is None:
        book_author = Author(name=author_data.name, born=None)
        db.add(book_author)

    book = Book(
        title=book_data.title,
        published=book_data.published,
        genres=get_or_create_genres(db, book_data.genres),
    )
    book_author.books.append(book)
    db.add(book)

    commit_or_raise(db, args)

    # Reload so the event payload carries the author and tags
    book = db.execute(book_query().where(Book.id == book.id)).scalar_one()
    logger.info(f"Added book '{book.title}' by {book.author.name} (id={book.id})")
    return book_to_graphql(book)


# =============================================================================
# Mutation Type
# =============================================================================


@strawberry.type
class Mutation:
    """
    GraphQL Mutation type containing all write operations.
    """

    # =========================================================================
    # Account Mutations
    # =========================================================================

    @strawberry.mutation(description="Register a new user")
    def create_user(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        favorite_genre: str,
    ) -> UserType | None:
        """
        Create a new user account.

        Fails with BAD_USER_INPUT (carrying the arguments) if the input is
        invalid or the username is taken.
        """
        db = info.context.db
        args = {"username": username, "favoriteGenre": favorite_genre}

        data, error = validate(
            UserCreate,
            {"username": username, "favorite_genre": favorite_genre},
        )
        if error:
            raise UserInputError(format_validation_error(error), invalid_args=args)

        stmt = select(User).where(User.username == data.username)
        if db.execute(stmt).scalar_one_or_none():
            raise UserInputError(
                f"Username '{data.username}' is already taken",
                invalid_args=args,
            )

        user = User(username=data.username, favorite_genre=data.favorite_genre)
        db.add(user)
        commit_or_raise(db, args)
        db.refresh(user)

        logger.info(f"Created user {user.username} (id={user.id})")
        return user_to_graphql(user)

    @strawberry.mutation(description="Log in with a username and the shared password")
    def login(
        self,
        info: Info[GraphQLContext, None],
        username: str,
        password: str,
    ) -> Token | None:
        """
        Authenticate a user.

        Returns a signed token embedding the user's username and id.
        """
        db = info.context.db

        stmt = select(User).where(User.username == username)
        user = db.execute(stmt).scalar_one_or_none()

        if user is None or not check_shared_password(password):
            logger.info(f"Failed login for username={username!r}")
            raise UserInputError(
                "wrong credentials",
                invalid_args={"username": username},
            )

        return Token(value=create_user_token(user))

    # =========================================================================
    # Catalog Mutations
    # =========================================================================

    @strawberry.mutation(description="Add a book, creating its author if needed")
    async def add_book(
        self,
        info: Info[GraphQLContext, None],
        title: str,
        author: str,
        published: int,
        genres: list[str | None],
    ) -> BookType | None:
        """
        Add a book to the catalog.

        Requires authentication. The author is looked up by name and
        created if missing (see save_book). The database work runs in the
        threadpool so other operations keep being served meanwhile.
        Subscribers to bookAdded receive the new book.
        """
        require_auth(info)

        added = await run_in_threadpool(
            save_book, info.context.db, title, author, published, genres
        )

        await info.context.pubsub.publish(EventType.BOOK_ADDED, added)

        return added

    @strawberry.mutation(description="Set an author's birth year")
    def edit_author(
        self,
        info: Info[GraphQLContext, None],
        name: str,
        set_born_to: int,
    ) -> AuthorType | None:
        """
        Update an existing author.

        Requires authentication. Fails with BAD_USER_INPUT if no author
        has this name.
        """
        require_auth(info)
        db = info.context.db
        args = {"name": name, "setBornTo": set_born_to}

        stmt = select(Author).options(selectinload(Author.books)).where(Author.name == name)
        author = db.execute(stmt).scalar_one_or_none()

        if author is None:
            raise UserInputError("Author doesn't exist", invalid_args=args)

        data, error = validate(AuthorUpdate, {"born": set_born_to})
        if error:
            raise UserInputError(format_validation_error(error), invalid_args=args)

        author.born = data.born
        commit_or_raise(db, args)
        db.refresh(author)

        return author_to_graphql(author)
