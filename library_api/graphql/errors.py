"""
GraphQL Errors

The two kinds of failure clients see:

- AuthenticationError: the operation needs a logged-in user
- UserInputError: bad arguments, missing records, wrong credentials

Both expose an `extensions` dict, which the GraphQL runtime copies into
the error entry of the response, e.g.

    {"message": "wrong credentials",
     "extensions": {"code": "BAD_USER_INPUT", "invalidArgs": {...}}}
"""

from typing import Any

from pydantic import ValidationError


class AuthenticationError(Exception):
    """Raised when authentication is required but not provided."""

    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "not authenticated"):
        super().__init__(message)
        self.message = message
        self.extensions: dict[str, Any] = {"code": self.code}


class UserInputError(Exception):
    """Raised when input validation fails or a referenced record is missing."""

    code = "BAD_USER_INPUT"

    def __init__(self, message: str, invalid_args: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.invalid_args = invalid_args or {}
        self.extensions: dict[str, Any] = {
            "code": self.code,
            "invalidArgs": self.invalid_args,
        }


def format_validation_error(exc: ValidationError) -> str:
    """
    Render a Pydantic ValidationError as a single line.

    Example:
        "title: String should have at least 2 characters; published: ..."
    """
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)
