"""
Chunks router package.

Exports the router for chunk ingestion and lookup endpoints.
"""

from .chunks_router import router

__all__ = ["router"]
