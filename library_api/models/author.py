"""
Author Model

Represents an author in the catalog.

An author is created the first time a book by them is added, and the
only later change is setting their birth year. Authors are never deleted.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

# TYPE_CHECKING avoids a circular import between author and book models
if TYPE_CHECKING:
    from library_api.models.book import Book


class Author(Base):
    """
    Author model representing writers in the catalog.

    Table: authors

    Relationships:
    - books: One-to-Many, ordered by book id (the order books were added)

    Indexes:
    - Primary key on id (automatic)
    - name: Unique index; the name is how clients refer to an author

    Example:
        author = Author(name="Martin Fowler", born=1963)
        db.add(author)
        db.commit()
    """

    __tablename__ = "authors"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Basic Fields
    # -------------------------------------------------------------------------
    # unique=True also makes concurrent "first book by a new author" inserts
    # safe: the losing transaction fails instead of creating a duplicate
    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Author's full name"
    )

    born: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Birth year"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the author record was created"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the author record was last updated"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    #   author.books            # books in the order they were added
    #   author.books.append(b)  # also sets b.author (back_populates)
    books: Mapped[list["Book"]] = relationship(
        "Book",
        back_populates="author",
        order_by="Book.id",
    )

    @property
    def book_ids(self) -> list[int]:
        """Identifiers of this author's books, in the order they were added."""
        return [book.id for book in self.books]

    def __repr__(self) -> str:
        return f"Author(id={self.id}, name='{self.name}')"
