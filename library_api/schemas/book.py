"""
Book Pydantic Schemas

Validation rules for books added through the addBook mutation.
"""

from pydantic import BaseModel, Field, field_validator


class BookCreate(BaseModel):
    """
    Schema for creating a book.

    Contains validation for:
    - title (at least 2 characters, not blank)
    - genres (blank and null tags are dropped, duplicates collapsed)
    """

    title: str = Field(
        ...,
        min_length=2,
        max_length=500,
        description="Book title",
        examples=["Refactoring to patterns"],
    )

    published: int = Field(
        ...,
        description="Year of publication",
        examples=[2008],
    )

    genres: list[str | None] = Field(
        default_factory=list,
        description="Genre tags",
        examples=[["refactoring", "patterns"]],
    )

    @field_validator("title")
    @classmethod
    def title_must_not_be_blank(cls, v: str) -> str:
        """Reject whitespace-only titles."""
        if not v.strip():
            raise ValueError("Title cannot be empty or whitespace")
        return v.strip()

    @field_validator("genres")
    @classmethod
    def normalize_genres(cls, v: list[str | None]) -> list[str]:
        """Keep the first occurrence of each non-blank tag, in order."""
        tags: list[str] = []
        for genre in v:
            if genre is None or not genre.strip():
                continue
            tag = genre.strip()
            if tag not in tags:
                tags.append(tag)
        return tags
