"""
User Model

Represents a registered user of the catalog API.

Users have no stored credentials: every account logs in with the shared
password from settings. A user is created once and never modified.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from library_api.database import Base


class User(Base):
    """
    User model.

    Table: users

    Indexes:
    - username: Unique index for login lookups

    Example:
        user = User(username="mluukkai", favorite_genre="refactoring")
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique username used to log in"
    )

    favorite_genre: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Genre the user prefers, used by clients for recommendations"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the account was created"
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, username='{self.username}')"
