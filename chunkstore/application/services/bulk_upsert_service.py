"""
Bulk upsert orchestrator.

Applies one provider selection to a list of items and upserts them one at
a time. A failing item is recorded and the batch carries on; items are
committed independently, never as one transaction.

Dependencies: pydantic, chunkstore.application.services.chunk_service
System role: Best-effort batch ingestion
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import pydantic

from chunkstore.application.services.chunk_service import ChunkService, resolve_provider
from chunkstore.core.exceptions import ChunkStoreException, ValidationError
from chunkstore.models.chunk import BulkUpsertItem
from chunkstore.models.provider import EmbeddingProvider, UpsertAction

logger = logging.getLogger(__name__)


@dataclass
class BulkItemResult:
    """Outcome of one bulk item; index is the item's position in the input."""

    index: int
    success: bool
    chunk: dict | None = None
    action: UpsertAction | None = None
    error: str | None = None


@dataclass
class BulkUpsertResult:
    """Ordered per-item outcomes plus counts."""

    results: list[BulkItemResult] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def error_count(self) -> int:
        return sum(1 for result in self.results if not result.success)

    @property
    def total(self) -> int:
        return len(self.results)


def _item_error_message(error: pydantic.ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "item"
    return f"{location}: {first.get('msg', 'invalid value')}"


class BulkUpsertService:
    """Bulk upsert orchestrator."""

    def __init__(self, chunk_service: ChunkService) -> None:
        """
        Initialize bulk upsert service.

        Args:
            chunk_service: Single-item upsert service
        """
        self.chunk_service = chunk_service

    async def bulk_upsert(self, provider: Any, items: Any) -> BulkUpsertResult:
        """
        Upsert every item with the same provider selection.

        The provider is validated before any item is looked at, so an
        invalid selection produces no embedding calls and no writes.

        Args:
            provider: openai, local or both (None means openai)
            items: List of item payloads (dicts)

        Returns:
            BulkUpsertResult: One result per item in input order

        Raises:
            InvalidProviderError: Unknown provider selection
            ValidationError: items is not a list
        """
        selected = resolve_provider(provider)

        if not isinstance(items, list):
            raise ValidationError("items must be an array", field="items")

        outcome = BulkUpsertResult()
        for index, raw_item in enumerate(items):
            outcome.results.append(await self._upsert_item(index, selected, raw_item))

        logger.info(
            "Bulk upsert completed",
            extra={
                "provider": selected.value,
                "total": outcome.total,
                "success_count": outcome.success_count,
                "error_count": outcome.error_count,
            },
        )
        return outcome

    async def _upsert_item(
        self,
        index: int,
        provider: EmbeddingProvider,
        raw_item: Any,
    ) -> BulkItemResult:
        try:
            item = BulkUpsertItem.model_validate(raw_item)
            chunk, action = await self.chunk_service.upsert_chunk(
                provider=provider,
                content=item.content,
                channel_id=item.channel_id,
                user_id=item.user_id,
                writer_channel_id=item.writer_channel_id,
                metadata=item.metadata,
                id=item.id,
                embedding_local=item.embedding_local,
            )
            return BulkItemResult(index=index, success=True, chunk=chunk, action=action)
        except pydantic.ValidationError as e:
            return BulkItemResult(index=index, success=False, error=_item_error_message(e))
        except ChunkStoreException as e:
            logger.warning(
                "Bulk item failed",
                extra={"index": index, "error_type": type(e).__name__},
            )
            return BulkItemResult(index=index, success=False, error=e.message)
        except Exception:
            logger.exception("Unexpected failure in bulk item", extra={"index": index})
            return BulkItemResult(index=index, success=False, error="Internal error")
