"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/embeddings

Dependencies: chunkstore.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from chunkstore.api.deps.dependencies import get_embedder, get_settings_dependency
from chunkstore.boundary.db import get_async_db
from chunkstore.boundary.embeddings import OpenAIEmbedder
from chunkstore.configs import Settings

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    environment: str | None = None


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_settings_dependency),
) -> HealthResponse:
    """Basic health check; reports the configured environment."""
    return HealthResponse(
        status="healthy", message="Server Healthy", environment=settings.environment
    )


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)) -> HealthResponse:
    """Database health check (runs SELECT 1)."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database health check failed", extra={"error_type": type(e).__name__})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed",
        )
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/embeddings", response_model=HealthResponse)
async def health_check_embeddings(
    embedder: OpenAIEmbedder = Depends(get_embedder),
) -> HealthResponse:
    """Report whether the OpenAI embedding provider is configured."""
    if not embedder.is_configured:
        return HealthResponse(status="degraded", message="OPENAI_API_KEY is not configured")
    return HealthResponse(status="healthy", message=f"OpenAI embeddings configured ({embedder.model})")
