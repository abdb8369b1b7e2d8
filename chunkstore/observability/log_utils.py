"""
Structured logging helpers.

Context passed through ``extra=`` is rendered by the log formatter as
``key=value`` pairs. Embedding vectors are reduced to their dimension
count so that 1536 floats never end up in a log line.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from enum import Enum
from numbers import Number
from typing import Any

# Attributes every LogRecord carries; anything else was supplied via extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "correlation_id", "taskName"}


def _is_vector(value: Any) -> bool:
    if hasattr(value, "shape") and hasattr(value, "dtype"):
        return True
    return (
        isinstance(value, (list, tuple))
        and len(value) > 0
        and all(isinstance(item, Number) and not isinstance(item, bool) for item in value)
    )


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Render a context value for a log line.

    Numeric sequences (lists, tuples, numpy arrays) become
    ``vector(<n> dims)``, other containers report their size, and long
    strings are truncated.

    Args:
        value: Value to render
        max_length: Maximum string length before truncating

    Returns:
        str: Log-safe representation
    """
    if value is None:
        return "None"
    if isinstance(value, Enum):
        return str(value.value)
    if _is_vector(value):
        return f"vector({len(value)} dims)"
    if isinstance(value, (list, tuple)):
        return f"{type(value).__name__}({len(value)} items)"
    if isinstance(value, dict):
        return f"dict({len(value)} keys)"

    try:
        text = str(value)
    except Exception as e:
        return f"<unrenderable {type(e).__name__}>"
    if len(text) > max_length:
        return f"{text[:max_length]}... (truncated, {len(text)} total)"
    return text


def record_context(record: logging.LogRecord) -> dict[str, str]:
    """
    Collect the extra= fields of a record, rendered with safe_log_value.

    Args:
        record: Log record

    Returns:
        dict[str, str]: Extra fields in insertion order
    """
    return {
        key: safe_log_value(value)
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context: Any,
) -> None:
    """
    Log a message with structured context.

    Vectors in ``context`` are summarised before the record is created, so
    handlers other than ours never see raw embeddings either.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Context key-value pairs
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(
        level,
        message,
        extra={key: safe_log_value(value) for key, value in context.items()},
    )
