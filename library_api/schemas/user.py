"""
User Pydantic Schemas

Validation for accounts created through the createUser mutation.
"""

from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    """
    Schema for user registration.

    There is no password field: every account shares the password
    configured in settings.
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Unique username",
        examples=["mluukkai"],
    )

    favorite_genre: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Preferred genre",
        examples=["refactoring"],
    )

    @field_validator("username", "favorite_genre")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value cannot be empty or whitespace")
        return v.strip()
