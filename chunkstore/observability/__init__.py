"""Observability: logging configuration, correlation IDs and HTTP middleware."""

from chunkstore.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from chunkstore.observability.log_utils import log_with_context, safe_log_value
from chunkstore.observability.logger import configure_logging

__all__ = [
    "clear_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
    "log_with_context",
    "safe_log_value",
    "configure_logging",
]
