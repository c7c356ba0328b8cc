"""Keeps the external document index in step with product records.

The index is a best-effort search accelerator. The product record stays
authoritative: a failed sync leaves the product valid but missing from AI
search until its next successful sync. Nothing here retries.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from src.config import settings
from src.errors import IndexIngestError, IndexSyncError
from src.models.indexing import ChunkMetadata, IndexChunk
from src.models.product import Product
from src.models.result import Err, Ok, Result
from src.services.indexing.chunker import chunk_text
from src.services.indexing.index_client import DocumentIndexClient

logger = logging.getLogger(__name__)


def chunk_id(product_id: str, index: int) -> str:
    return f"{product_id}-chunk-{index}"


def render_product_text(product: Product) -> str:
    """Canonical text block that gets chunked for the index."""

    sections = [
        f"Title: {product.title}",
        f"Short Description: {product.short_description}",
        f"Full Description: {product.full_description}",
    ]
    if product.specifications:
        sections.append(f"Specifications: {product.specifications}")
    sections.extend(
        [
            f"Tags: {', '.join(product.tags)}",
            f"Images: {', '.join(product.images)}",
            f"Files: {', '.join(product.pdf_files)}",
        ]
    )
    return "\n\n".join(sections)


class IndexSynchronizer:
    """Builds product chunks and pushes or removes them in the document index."""

    def __init__(
        self,
        client: DocumentIndexClient | None,
        *,
        max_tokens: int | None = None,
        overlap_tokens: int | None = None,
        platform_name: str | None = None,
    ) -> None:
        self._client = client
        self._max_tokens = max_tokens or settings.CHUNK_MAX_TOKENS
        self._overlap_tokens = (
            overlap_tokens if overlap_tokens is not None else settings.CHUNK_OVERLAP_TOKENS
        )
        self._platform_name = platform_name or settings.PLATFORM_NAME

    @property
    def enabled(self) -> bool:
        return self._client is not None

    @property
    def backend_name(self) -> str:
        return self._client.backend_name if self._client else "disabled"

    def build_chunks(self, product: Product) -> list[IndexChunk]:
        metadata = ChunkMetadata(
            product_id=product.id,
            supplier_id=product.supplier_id,
            title=product.title,
            tags=product.tags,
            images=product.images,
            pdf_files=product.pdf_files,
            context=(
                f"Product from {self._platform_name} supplier. "
                f"Title: {product.title}"
            ),
        )
        pieces = chunk_text(
            render_product_text(product),
            max_tokens=self._max_tokens,
            overlap_tokens=self._overlap_tokens,
        )
        return [
            IndexChunk(id=chunk_id(product.id, index), content=content, metadata=metadata)
            for index, content in enumerate(pieces)
        ]

    def chunk_ids(self, product: Product) -> list[str]:
        return [chunk.id for chunk in self.build_chunks(product)]

    async def ingest(self, chunks: Sequence[IndexChunk]) -> None:
        """Write chunks one at a time. The first failure raises IndexIngestError."""

        if self._client is None:
            return

        for chunk in chunks:
            payload = chunk.metadata.as_index_payload(
                timestamp_ms=int(time.time() * 1000)
            )
            try:
                await self._client.upsert_document(chunk.id, chunk.content, payload)
            except Exception as exc:
                raise IndexIngestError(chunk.id, str(exc)) from exc

        logger.info(
            "Indexed product chunks",
            extra={"chunks": len(chunks), "backend": self.backend_name},
        )

    async def remove(self, document_ids: Sequence[str]) -> Result[int, IndexSyncError]:
        """Delete every id, carrying on past individual failures."""

        if self._client is None or not document_ids:
            return Ok(0)

        failed: list[str] = []
        for document_id in document_ids:
            try:
                await self._client.delete_document(document_id)
            except Exception as exc:
                logger.warning("Index delete failed for %s: %s", document_id, exc)
                failed.append(document_id)

        if failed:
            return Err(IndexSyncError(f"Failed to delete documents: {', '.join(failed)}"))
        return Ok(len(document_ids))

    async def sync_product(
        self,
        product: Product,
        previous: Product | None = None,
    ) -> Result[int, IndexSyncError]:
        """Push the product's chunks, first removing chunks of ``previous`` that
        the new rendering no longer produces. Never raises."""

        if self._client is None:
            logger.debug("Indexing disabled, skipping product %s", product.id)
            return Ok(0)

        try:
            chunks = self.build_chunks(product)
            if previous is not None:
                current_ids = {chunk.id for chunk in chunks}
                stale = [cid for cid in self.chunk_ids(previous) if cid not in current_ids]
                match await self.remove(stale):
                    case Err(error):
                        logger.warning(
                            "Stale chunks left in index for product %s: %s",
                            product.id,
                            error,
                        )
            await self.ingest(chunks)
        except IndexSyncError as exc:
            return Err(exc)
        except Exception as exc:
            logger.exception("Unexpected error syncing product %s", product.id)
            return Err(IndexSyncError(str(exc)))
        return Ok(len(chunks))

    async def remove_product(self, product: Product) -> Result[int, IndexSyncError]:
        if self._client is None:
            return Ok(0)
        return await self.remove(self.chunk_ids(product))
