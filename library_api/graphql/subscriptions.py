"""
GraphQL Subscription Resolvers

Long-lived operations delivered over WebSocket (graphql-transport-ws or
graphql-ws). Each connected client gets its own event stream, which is
closed when the client unsubscribes or disconnects.

The database session in a subscription's context lives as long as the
WebSocket connection. Nested fields of an event (Author.books) read through
it, so its transaction is ended after every delivered event: the pooled
connection goes back to the pool while the client waits, and the next
event is resolved against fresh rows rather than the previous snapshot.
"""

from collections.abc import AsyncGenerator

import strawberry
from strawberry.types import Info

from library_api.graphql.context import GraphQLContext
from library_api.graphql.types.book import BookType
from library_api.services.events import EventType


@strawberry.type
class Subscription:
    """GraphQL Subscription type."""

    @strawberry.subscription(description="Books added to the catalog from now on")
    async def book_added(
        self,
        info: Info[GraphQLContext, None],
    ) -> AsyncGenerator[BookType, None]:
        db = info.context.db
        stream = info.context.pubsub.subscribe(EventType.BOOK_ADDED)
        try:
            # Authenticating the connection may have opened a transaction
            db.rollback()
            async for book in stream:
                yield book
                # Resumed only after the event has been resolved and sent
                db.rollback()
        finally:
            stream.close()
