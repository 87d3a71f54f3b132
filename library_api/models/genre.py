"""
Genre Model

A genre tag that books can carry ("refactoring", "crime", ...).

Genres have no lifecycle of their own: addBook creates any tag it has not
seen before, and tags are matched by exact name.
"""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_api.database import Base

if TYPE_CHECKING:
    from library_api.models.book import Book


class Genre(Base):
    """
    Genre model representing book tags.

    Table: genres

    Indexes:
    - name: Unique index for preventing duplicate tags
    """

    __tablename__ = "genres"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        index=True,
        nullable=False,
        comment="Genre tag (e.g., 'refactoring', 'crime')"
    )

    books: Mapped[list["Book"]] = relationship(
        "Book",
        secondary="book_genres",
        back_populates="genres",
    )

    def __repr__(self) -> str:
        return f"Genre(id={self.id}, name='{self.name}')"
