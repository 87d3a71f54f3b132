"""
Author Pydantic Schemas

Validation rules for author records, checked in memory before any write.

The GraphQL layer builds these from resolver arguments; a failure becomes
a BAD_USER_INPUT error carrying the offending arguments.
"""

from pydantic import BaseModel, Field, field_validator


class AuthorBase(BaseModel):
    """
    Shared author fields.

    Author names double as the identity clients use in allBooks(author:)
    and editAuthor(name:), so they have to be reasonably distinctive.
    """

    name: str = Field(
        ...,
        min_length=4,
        max_length=255,
        description="Author's full name",
        examples=["Martin Fowler", "Robert Martin"],
    )

    born: int | None = Field(
        default=None,
        description="Birth year",
        examples=[1963],
    )

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        """
        Reject whitespace-only names and normalize surrounding whitespace.

        Raises:
            ValueError: If the name is blank
        """
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()


class AuthorCreate(AuthorBase):
    """Schema for an author being created or re-validated by addBook."""
    pass


class AuthorUpdate(BaseModel):
    """
    Schema for editAuthor.

    Only the birth year can change after an author exists.
    """

    born: int = Field(
        ...,
        description="New birth year",
        examples=[1963],
    )
