"""
GraphQL Package

The catalog's GraphQL API, built with Strawberry GraphQL and served by
FastAPI at /graphql (HTTP for queries and mutations, WebSocket for
subscriptions).

Features:
- Queries: bookCount, authorCount, allBooks, allAuthors, me
- Mutations: createUser, login, addBook, editAuthor
- Subscriptions: bookAdded
- Authentication via bearer token in context

Example Query:
    query {
        allBooks(genre: "refactoring") {
            title
            published
            author { name bookCount }
        }
    }
"""

import strawberry
from strawberry.fastapi import GraphQLRouter

from library_api.config import get_settings
from library_api.graphql.context import get_context
from library_api.graphql.mutations import Mutation
from library_api.graphql.queries import Query
from library_api.graphql.subscriptions import Subscription

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
)


def create_graphql_router() -> GraphQLRouter:
    """
    Create the GraphQL router for FastAPI.

    Returns:
        GraphQLRouter configured with schema and context
    """
    settings = get_settings()
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide=settings.graphql_ide_option,
    )


__all__ = ["schema", "create_graphql_router"]
