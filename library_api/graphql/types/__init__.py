"""
GraphQL Types Package

GraphQL type definitions mapping to the SQLAlchemy models, written with
Strawberry's decorator syntax. Python class names carry a `Type` suffix;
the names exposed in the schema do not.

Types defined here:
- AuthorType (Author): author with derived bookCount and their books
- BookType (Book): book with its author resolved inline
- UserType (User): registered user
- Token: login result
"""

from library_api.graphql.types.author import AuthorType
from library_api.graphql.types.book import BookType
from library_api.graphql.types.user import Token, UserType

__all__ = [
    "AuthorType",
    "BookType",
    "UserType",
    "Token",
]
