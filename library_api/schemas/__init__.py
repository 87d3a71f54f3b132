"""
Pydantic Schemas Package

Input validation for the catalog, kept separate from the SQLAlchemy models
so that a record can be checked in memory before anything is written.

Schema Naming Convention:
- XxxBase: Shared fields
- XxxCreate: Fields required when creating a new record
- XxxUpdate: Fields allowed when updating
"""

from library_api.schemas.author import AuthorBase, AuthorCreate, AuthorUpdate
from library_api.schemas.book import BookCreate
from library_api.schemas.user import UserCreate

__all__ = [
    "AuthorBase",
    "AuthorCreate",
    "AuthorUpdate",
    "BookCreate",
    "UserCreate",
]
