"""
GraphQL Author Type

An author as clients see it. The author's books are resolved on demand
from the ordered list of book ids captured when the type was built, using
the session of whichever request is asking (a query, or the WebSocket
connection a bookAdded event is delivered on).
"""

from dataclasses import field
from typing import TYPE_CHECKING, Annotated

import strawberry
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.models import Author, Book

if TYPE_CHECKING:
    from library_api.graphql.types.book import BookType


@strawberry.type(name="Author")
class AuthorType:
    """
    GraphQL type representing a book author.

    Maps to the Author SQLAlchemy model. bookCount is derived from the
    author's book list, it is not stored.
    """

    name: str
    id: strawberry.ID
    born: int | None = None
    book_ids: strawberry.Private[list[int]] = field(default_factory=list)

    @strawberry.field(description="Number of books by this author")
    def book_count(self) -> int:
        return len(self.book_ids)

    @strawberry.field(description="Books by this author, in the order they were added")
    def books(
        self,
        info: Info[GraphQLContext, None],
    ) -> list[Annotated["BookType", strawberry.lazy("library_api.graphql.types.book")]]:
        # queries imports this module, so the converter is looked up at call time
        from library_api.graphql.queries import book_to_graphql

        if not self.book_ids:
            return []

        stmt = (
            select(Book)
            .options(
                selectinload(Book.author).selectinload(Author.books),
                selectinload(Book.genres),
            )
            .where(Book.id.in_(self.book_ids))
            # Long-lived (subscription) sessions may hold older copies of these rows
            .execution_options(populate_existing=True)
        )
        books = {book.id: book for book in info.context.db.execute(stmt).scalars()}
        return [book_to_graphql(books[book_id]) for book_id in self.book_ids if book_id in books]
