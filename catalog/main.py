"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Tests can build an app with their own event bus and image store

2. Lifespan Events
   - startup: create missing tables (when enabled), log configuration
   - shutdown: log and let connections close

3. Capabilities on app.state
   - event_bus: feeds GraphQL subscriptions
   - image_store: chunked image storage for uploads and downloads
   Both are read by the GraphQL context getter and the HTTP dependencies.

4. Exception Handlers
   - Convert database errors on plain HTTP routes to 500 responses
   - GraphQL errors are reported inside the GraphQL response instead
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from catalog.config import get_settings
from catalog.database import create_tables
from catalog.graphql import create_graphql_router
from catalog.routers import images_router, testing_router
from catalog.services.events import EventBus
from catalog.services.images import ImageStore

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

    Startup is a single linear sequence: prepare the database, then serve.
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.database_auto_create:
        logger.info("Creating missing database tables")
        create_tables()

    if not settings.jwt_secret:
        logger.warning("JWT_SECRET is not set - login will be rejected")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")


# =============================================================================
# Application Factory
# =============================================================================
def create_app(
    event_bus: EventBus | None = None,
    image_store: ImageStore | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        event_bus: Event bus to publish mutations on (a new one by default)
        image_store: Image store for uploads (built from settings by default)

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="GraphQL API for a catalog of books and authors.",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.event_bus = event_bus or EventBus()
    app.state.image_store = image_store or ImageStore(
        chunk_size=settings.image_chunk_size,
        max_size=settings.max_image_size,
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
            content={"detail": "A database error occurred. Please try again later."},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all exception handler for the HTTP routes."""
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug:
            return JSONResponse(status_code=500, content={"detail": str(exc)})

        return JSONResponse(
            status_code=500,
            content={"detail": "An internal error occurred."},
        )

    # -------------------------------------------------------------------------
    # GraphQL Endpoint
    # -------------------------------------------------------------------------
    # Queries and mutations over HTTP POST, subscriptions over WebSocket,
    # both at /graphql.
    graphql_router = create_graphql_router()
    app.include_router(graphql_router, prefix="/graphql", tags=["GraphQL"])

    # -------------------------------------------------------------------------
    # HTTP Routes
    # -------------------------------------------------------------------------
    app.include_router(images_router)

    if not settings.is_production:
        app.include_router(testing_router)

    @app.get("/health", tags=["Health"], summary="Health check")
    async def health_check() -> dict:
        """Report that the API is up, with subscription statistics."""
        return {
            "status": "healthy",
            "app": settings.app_name,
            "environment": settings.environment,
            "graphql": {"endpoint": "/graphql"},
            "subscriptions": app.state.event_bus.get_stats(),
        }

    @app.get("/ready", tags=["Health"], summary="Readiness check", response_class=PlainTextResponse)
    async def ready() -> str:
        """Readiness probe."""
        return "READY"

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn catalog.main:app
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catalog.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
