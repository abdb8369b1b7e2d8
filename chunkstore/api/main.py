"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, chunkstore.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chunkstore import __version__
from chunkstore.api.deps.dependencies import get_service_cache
from chunkstore.boundary.db import dispose_engine
from chunkstore.configs import get_settings
from chunkstore.observability import configure_logging
from chunkstore.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

from .routers import (
    chunks_router,
    embed_router,
    health_router,
    search_router,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    # Startup
    cache = get_service_cache()
    embedder = cache.embedder
    logger.info(
        "Service cache pre-warmed",
        extra={
            "environment": settings.environment,
            "openai_configured": embedder.is_configured,
            "model": embedder.model,
        },
    )

    yield

    # Shutdown
    await embedder.close()
    cache.clear()
    await dispose_engine()
    logger.info("Service cache cleared")


def _format_validation_errors(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "; ".join(messages)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return malformed request bodies as 400 naming the offending fields."""
    detail = _format_validation_errors(exc)
    logger.warning(
        "Request validation failed",
        extra={"path": request.url.path, "error": detail},
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()
    app = FastAPI(
        title="Chunk Store API",
        description="Dual-provider embedding storage and similarity search",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(search_router, prefix="/api/v1")
    app.include_router(chunks_router, prefix="/api/v1")
    app.include_router(embed_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "chunkstore.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
