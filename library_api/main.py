"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application that serves
the catalog's GraphQL API.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Easier to test (can create multiple instances)

2. Lifespan Events
   - startup: log configuration, create the event bus (app.state.pubsub)
   - shutdown: close the event bus so open subscriptions end cleanly

3. Exception Handlers
   - Database errors outside GraphQL become a generic 500
   - Errors inside resolvers are reported by the GraphQL runtime
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from library_api.config import get_settings
from library_api.graphql import create_graphql_router
from library_api.services.events import EventType, PubSub

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield runs on startup, code after yield on shutdown.
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Environment: {settings.environment}")

    # One bus per application run; resolvers reach it through the GraphQL context
    app.state.pubsub = PubSub()

    yield

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")
    await app.state.pubsub.close()


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Library GraphQL API

A GraphQL API for a catalog of books and their authors.

### Operations
- **Queries**: bookCount, authorCount, allBooks, allAuthors, me
- **Mutations**: createUser, login, addBook, editAuthor
- **Subscriptions**: bookAdded

### Authentication
`login` returns a token; send it as `Authorization: bearer <token>`.
addBook and editAuthor require it.
        """,
        version=settings.api_version,
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """Log database errors and hide their details from clients."""
        logger.error(f"Database error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "A database error occurred. Please try again later."
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        Outside production, debug mode returns the error message to the client.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug and not settings.is_production:
            return JSONResponse(
                status_code=500,
                content={"detail": str(exc)},
            )

        return JSONResponse(
            status_code=500,
            content={"detail": "An internal error occurred."},
        )

    # -------------------------------------------------------------------------
    # GraphQL Endpoint
    # -------------------------------------------------------------------------
    graphql_router = create_graphql_router()
    app.include_router(graphql_router, prefix="/graphql", tags=["GraphQL"])

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and healthy.",
    )
    async def health_check(request: Request) -> dict:
        """Health check used by load balancers and monitoring."""
        pubsub: PubSub = request.app.state.pubsub
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.api_version,
            "graphql": {
                "endpoint": "/graphql",
                "ide": settings.graphql_ide_option,
            },
            "subscriptions": {
                "open": not pubsub.closed,
                "book_added_subscribers": pubsub.subscriber_count(EventType.BOOK_ADDED),
            },
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "graphql": "/graphql",
            "health": "/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn library_api.main:app
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "library_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
