"""
GraphQL Book Type

Defines the Book type returned by queries, mutations and the bookAdded
subscription. The author is resolved inline when the type is built.
"""

import strawberry

from library_api.graphql.types.author import AuthorType


@strawberry.type(name="Book")
class BookType:
    """
    GraphQL type representing a book.

    Maps to the Book SQLAlchemy model with its author and genre tags.
    """

    title: str
    published: int
    author: AuthorType
    id: strawberry.ID
    genres: list[str | None] = strawberry.field(default_factory=list)
