"""
FastAPI Application Factory

Main application setup and configuration.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from typing import Optional
import logging

from rollcall import __version__
from rollcall.api.routes import health, identity
from rollcall.config import RollcallConfig
from rollcall.directory import DirectoryClient
from rollcall.errors import (
    ConfigurationError,
    DirectoryQueryError,
    DirectoryUnavailable,
    ParseError,
)

logger = logging.getLogger(__name__)


def create_app(
    directory: Optional[DirectoryClient] = None,
    config: Optional[RollcallConfig] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        directory: Directory backend to use. If None, it is built from
                   config on the first request that needs it.
        config: Rollcall configuration. If None, loads from environment.

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Rollcall Identity Resolution API",
        description="Resolve free-text personal names to directory accounts",
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.config = config or RollcallConfig.from_env()
    app.state.directory = directory

    # Include routers
    app.include_router(health.router, tags=["Health"])
    app.include_router(identity.router, prefix="/api", tags=["Identity"])

    @app.exception_handler(ParseError)
    async def parse_error_handler(request: Request, exc: ParseError):
        return JSONResponse(
            status_code=422,
            content={"error": "Unparseable name", "input": exc.raw, "detail": str(exc)},
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid option", "detail": str(exc)},
        )

    @app.exception_handler(DirectoryUnavailable)
    async def directory_unavailable_handler(request: Request, exc: DirectoryUnavailable):
        logger.error(f"Directory unavailable: {exc}")
        return JSONResponse(
            status_code=503,
            content={"error": "Directory unavailable", "detail": str(exc)},
        )

    @app.exception_handler(DirectoryQueryError)
    async def directory_query_error_handler(request: Request, exc: DirectoryQueryError):
        logger.error(f"Directory query failed: {exc}")
        return JSONResponse(
            status_code=502,
            content={"error": "Directory query failed", "detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    return app


# Create the app instance (directory is built lazily from the environment)
app = create_app()
