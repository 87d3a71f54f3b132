"""
GraphQL Context

Provides request context to all GraphQL resolvers:
- Database session for queries
- Authentication result (current user, if any)
- The application's event bus for subscriptions

The context is created fresh for each GraphQL request, and once per
WebSocket connection for subscriptions, and reaches resolvers through
the `info` parameter.
"""

from fastapi import Depends
from fastapi.requests import HTTPConnection
from sqlalchemy.orm import Session
from strawberry.fastapi import BaseContext
from strawberry.types import Info

from library_api.database import get_db
from library_api.graphql.errors import AuthenticationError
from library_api.models.user import User
from library_api.services.auth import AuthResult, resolve_auth
from library_api.services.events import PubSub


class GraphQLContext(BaseContext):
    """
    Context object available to all GraphQL resolvers.

    Attributes:
        db: SQLAlchemy database session
        auth: Authentication result for this request
        pubsub: Event bus shared by the whole application
    """

    def __init__(self, db: Session, auth: AuthResult, pubsub: PubSub):
        super().__init__()
        self.db = db
        self.auth = auth
        self.pubsub = pubsub

    @property
    def user(self) -> User | None:
        """Currently authenticated user (None if anonymous)."""
        return self.auth.user


def require_auth(info: Info[GraphQLContext, None]) -> User:
    """
    Return the current user or fail the operation.

    Raises:
        AuthenticationError: If the request carries no valid token
    """
    auth = info.context.auth
    if not auth.is_authenticated:
        raise AuthenticationError()
    return auth.user


async def get_context(
    connection: HTTPConnection,
    db: Session = Depends(get_db),
) -> GraphQLContext:
    """
    Create GraphQL context for each request.

    Used as a FastAPI dependency by the GraphQL router, so it serves both
    plain HTTP requests and subscription WebSockets. Token problems do not
    fail the request; they leave the context anonymous.

    Args:
        connection: The HTTP request or WebSocket
        db: Database session for this request

    Returns:
        GraphQLContext with db session, auth result and event bus
    """
    auth = resolve_auth(db, connection.headers.get("Authorization"))
    return GraphQLContext(
        db=db,
        auth=auth,
        pubsub=connection.app.state.pubsub,
    )
