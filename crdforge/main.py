"""FastAPI application entry point.

Main application setup with middleware, routing, and lifecycle management.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from crdforge import __version__
from crdforge.api import crd_router, manifests_router
from crdforge.api.schemas import HealthResponse, error_code_for, error_response, success_response
from crdforge.core.config import Settings, get_settings
from crdforge.core.factory import ComponentFactory
from crdforge.core.logging_config import setup_logging
from crdforge.db.session import close_db, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager.

    Creates the database tables when a SQL store is configured and disposes
    the engine on shutdown.
    """
    settings: Settings = app.state.settings
    factory: ComponentFactory = app.state.factory

    # Startup
    logger.info("Starting CRD template API...")

    if factory.uses_database():
        try:
            logger.info("Initializing database...")
            await init_db(settings)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}", exc_info=True)
            raise

    yield

    # Shutdown
    logger.info("Shutting down CRD template API...")

    if factory.uses_database():
        try:
            await close_db()
            logger.info("Database connections closed")
        except Exception as e:
            logger.error(f"Error closing database: {e}", exc_info=True)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="CRD Template API",
        description="Form templates from CRD schemas and YAML manifest generation",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Store settings and strategies in app state
    app.state.settings = settings
    app.state.factory = ComponentFactory(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.include_router(crd_router)
    app.include_router(manifests_router)
    logger.info("Registered crd and manifests routers")

    @app.get("/healthz", tags=["health"])
    @app.get("/api/v1/health", tags=["health"])
    async def health_check() -> JSONResponse:
        """Health check endpoint for load balancers and monitoring."""
        return success_response(HealthResponse())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        """Wrap HTTP errors in the response envelope."""
        return error_response(exc.status_code, error_code_for(exc), str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        """Reject malformed request bodies."""
        logger.warning(f"Validation error: {exc.errors()}")
        return error_response(status.HTTP_400_BAD_REQUEST, "BAD_REQUEST", "invalid request payload")

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Internal server error")

    logger.info("FastAPI application created successfully")
    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info(f"Starting uvicorn server on {settings.host}:{settings.port}...")
    uvicorn.run(
        "crdforge.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
