"""
GraphQL Query Resolvers

Defines all read operations (queries) for the GraphQL API.
Each resolver reads through the database session in the context.
"""

import strawberry
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext, require_auth
from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import UserType
from library_api.models import Author, Book, Genre, User


def author_to_graphql(author: Author) -> AuthorType:
    """Convert SQLAlchemy Author model to GraphQL AuthorType."""
    return AuthorType(
        id=strawberry.ID(str(author.id)),
        name=author.name,
        born=author.born,
        book_ids=author.book_ids,
    )


def book_to_graphql(book: Book) -> BookType:
    """
    Convert SQLAlchemy Book model to GraphQL BookType.

    The author (and the author's book list, for bookCount) must be loaded.
    """
    return BookType(
        id=strawberry.ID(str(book.id)),
        title=book.title,
        published=book.published,
        author=author_to_graphql(book.author),
        genres=book.genre_names,
    )


def user_to_graphql(user: User) -> UserType:
    """Convert SQLAlchemy User model to GraphQL UserType."""
    return UserType(
        id=strawberry.ID(str(user.id)),
        username=user.username,
        favorite_genre=user.favorite_genre,
    )


def book_query():
    """SELECT for books with everything book_to_graphql touches loaded."""
    return select(Book).options(
        selectinload(Book.author).selectinload(Author.books),
        selectinload(Book.genres),
    )


@strawberry.type
class Query:
    """
    GraphQL Query type containing all read operations.

    All resolvers receive an `info` parameter that contains the
    GraphQL context with database session and current user.
    """

    @strawberry.field(description="Total number of books")
    def book_count(self, info: Info[GraphQLContext, None]) -> int:
        db = info.context.db
        return db.execute(select(func.count()).select_from(Book)).scalar_one()

    @strawberry.field(description="Total number of authors")
    def author_count(self, info: Info[GraphQLContext, None]) -> int:
        db = info.context.db
        return db.execute(select(func.count()).select_from(Author)).scalar_one()

    @strawberry.field(description="List books, optionally filtered by author name and genre")
    def all_books(
        self,
        info: Info[GraphQLContext, None],
        author: str | None = None,
        genre: str | None = None,
    ) -> list[BookType]:
        """
        Get books with optional filtering.

        Args:
            author: Only books by the author with exactly this name
            genre: Only books tagged with exactly this genre

        An omitted, null or empty filter is ignored.

        Returns:
            Matching books in the order they were added. An author name
            that matches no author yields an empty list.
        """
        db = info.context.db

        stmt = book_query()

        if author:
            author_id = db.execute(
                select(Author.id).where(Author.name == author)
            ).scalar_one_or_none()
            if author_id is None:
                return []
            stmt = stmt.where(Book.author_id == author_id)

        if genre:
            stmt = stmt.where(Book.genres.any(Genre.name == genre))

        books = db.execute(stmt.order_by(Book.id)).scalars().all()
        return [book_to_graphql(b) for b in books]

    @strawberry.field(description="List all authors")
    def all_authors(self, info: Info[GraphQLContext, None]) -> list[AuthorType]:
        db = info.context.db

        stmt = select(Author).options(selectinload(Author.books)).order_by(Author.id)
        authors = db.execute(stmt).scalars().all()

        return [author_to_graphql(a) for a in authors]

    @strawberry.field(description="The currently authenticated user")
    def me(self, info: Info[GraphQLContext, None]) -> UserType:
        """
        Get the current authenticated user.

        Fails with UNAUTHENTICATED if the request has no valid token.
        """
        user = require_auth(info)
        return user_to_graphql(user)
