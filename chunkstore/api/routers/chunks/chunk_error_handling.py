"""
Chunk error handling utilities.

Provides a decorator for consistent error handling across chunk, search
and embedding API endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from chunkstore.core.exceptions import ChunkStoreException

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_chunk_errors(func: F) -> F:
    """
    Decorator to transform domain exceptions into HTTPExceptions.

    This centralizes:
    - Logging of errors with their details
    - Mapping each exception to its HTTP status code
    - Keeping internal error text out of 500 responses
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except ChunkStoreException as e:
            if e.status_code >= 500:
                logger.error(
                    "Chunk store operation failed",
                    extra={"error_type": type(e).__name__, "details": str(e.details)},
                )
            else:
                logger.warning(
                    "Invalid chunk store request",
                    extra={"error_type": type(e).__name__, "error": e.message},
                )
            raise HTTPException(status_code=e.status_code, detail=e.message)

        except Exception as e:
            logger.exception(
                "Unexpected failure in chunk store operation",
                extra={"error_type": type(e).__name__},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred",
            )

    return wrapper  # type: ignore
