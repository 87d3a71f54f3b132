"""
SQLAlchemy Models Package

Database models for the catalog.

Model Relationships:
- Author -> Book: One-to-Many (an author owns an ordered list of books,
                  every book has exactly one author)
- Genre <-> Book: Many-to-Many (genre tags)
- User: standalone

Importing the models here registers them with Base.metadata, which both
create_tables() and Alembic autogenerate rely on.
"""

from library_api.models.author import Author
from library_api.models.genre import Genre
from library_api.models.book import Book, book_genres
from library_api.models.user import User

__all__ = [
    "Author",
    "Genre",
    "Book",
    "book_genres",
    "User",
]
