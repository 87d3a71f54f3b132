"""
Library GraphQL API Application Package

A GraphQL API for a catalog of books and authors with token-based
authentication for writes and a live feed of newly added books.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- main.py: FastAPI application factory and configuration
- models/: SQLAlchemy ORM models
- schemas/: Pydantic input validation
- graphql/: Strawberry schema, resolvers and request context
- services/: Tokens, request authentication, event bus
"""

__version__ = "0.1.0"
