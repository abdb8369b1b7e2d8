"""API routers."""

from .chunks import router as chunks_router
from .embed import router as embed_router
from .health import router as health_router
from .search import router as search_router

__all__ = [
    "chunks_router",
    "embed_router",
    "health_router",
    "search_router",
]
