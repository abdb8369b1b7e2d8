"""
Test suite for correlation IDs and logging configuration.

System role: Verification of request tracing helpers
"""

import logging

import numpy as np

from chunkstore.models.provider import EmbeddingProvider
from chunkstore.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from chunkstore.observability.log_utils import log_with_context, record_context, safe_log_value
from chunkstore.observability.logger import LOG_FORMAT, ContextFormatter, CorrelationIdFilter


def test_set_generates_id_when_missing() -> None:
    value = set_correlation_id()

    assert value
    assert get_correlation_id() == value
    clear_correlation_id()
    assert get_correlation_id() == ""


def test_set_keeps_supplied_id() -> None:
    assert set_correlation_id("req-1") == "req-1"
    assert get_correlation_id() == "req-1"
    clear_correlation_id()


def test_filter_attaches_correlation_id() -> None:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

    set_correlation_id("req-2")
    CorrelationIdFilter().filter(record)
    clear_correlation_id()

    assert record.correlation_id == "req-2"


def test_filter_uses_placeholder_outside_requests() -> None:
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

    CorrelationIdFilter().filter(record)

    assert record.correlation_id == "-"


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("chunkstore.test", logging.INFO, __file__, 1, "Chunk upserted", None, None)
    record.__dict__.update(extra)
    CorrelationIdFilter().filter(record)
    return record


def test_vectors_are_summarised() -> None:
    assert safe_log_value([0.1] * 1536) == "vector(1536 dims)"
    assert safe_log_value(np.zeros(384, dtype=np.float32)) == "vector(384 dims)"
    assert safe_log_value(["a", "b"]) == "list(2 items)"
    assert safe_log_value({"a": 1}) == "dict(1 keys)"
    assert safe_log_value(None) == "None"
    assert safe_log_value(EmbeddingProvider.LOCAL) == "local"
    assert safe_log_value("x" * 600).endswith("(truncated, 600 total)")


def test_record_context_keeps_only_extra_fields() -> None:
    record = make_record(chunk_id=7, provider=EmbeddingProvider.OPENAI)

    assert record_context(record) == {"chunk_id": "7", "provider": "openai"}


def test_formatter_appends_extra_fields() -> None:
    formatter = ContextFormatter(LOG_FORMAT)

    line = formatter.format(make_record(chunk_id=7, embedding_local=[0.02] * 384))

    assert line.endswith("Chunk upserted | chunk_id=7 embedding_local=vector(384 dims)")
    assert "[-]" in line


def test_formatter_without_extra_is_unchanged() -> None:
    line = ContextFormatter(LOG_FORMAT).format(make_record())

    assert line.endswith("[-] Chunk upserted")


def test_log_with_context_summarises_vectors(caplog) -> None:
    logger = logging.getLogger("chunkstore.test")

    with caplog.at_level(logging.INFO, logger="chunkstore.test"):
        log_with_context(logger, logging.INFO, "Chunk created", embedding_openai=[0.01] * 1536)

    assert caplog.records[-1].embedding_openai == "vector(1536 dims)"


def test_log_with_context_respects_level(caplog) -> None:
    logger = logging.getLogger("chunkstore.test")

    with caplog.at_level(logging.WARNING, logger="chunkstore.test"):
        log_with_context(logger, logging.INFO, "Chunk created", chunk_id=1)

    assert caplog.records == []
