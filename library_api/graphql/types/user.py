"""
GraphQL User Type

Defines the User and Token types.
"""

import strawberry


@strawberry.type(name="User")
class UserType:
    """
    GraphQL type representing a registered user.

    Maps to the User SQLAlchemy model.
    """

    username: str
    favorite_genre: str
    id: strawberry.ID


@strawberry.type
class Token:
    """
    Response type for the login mutation.

    `value` is a signed bearer token; send it back as
    `Authorization: bearer <value>`.
    """

    value: str
